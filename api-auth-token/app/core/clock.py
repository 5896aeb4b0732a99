# app/core/clock.py
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def to_naive_utc(moment: datetime) -> datetime:
    # as colunas DateTime do banco guardam UTC sem tzinfo
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)
