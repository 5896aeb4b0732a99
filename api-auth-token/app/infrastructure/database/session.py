# app/infrastructure/database/session.py

import logging
import random
import time
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from app.config.settings import settings

T = TypeVar("T")

logger = logging.getLogger(__name__)

_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def init_engine(database_url: str | None = None) -> Engine:
    global _engine, _SessionLocal

    url = database_url or settings.database_url
    kwargs: dict = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        # threads do servidor compartilham o pool; timeout cobre o lock de escrita
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}

    if _engine is not None:
        _engine.dispose()

    _engine = create_engine(url, **kwargs)
    _SessionLocal = sessionmaker(
        bind=_engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        return init_engine()
    return _engine


def init_db() -> None:
    """Cria as tabelas e garante os papéis padrão."""
    from app.infrastructure.database.base_model import BaseModel
    from app.infrastructure.database.models import RoleModel
    from app.infrastructure.database.models.role_model import DEFAULT_ROLE_NAMES

    BaseModel.metadata.create_all(get_engine())

    with db_session() as session:
        existing = set(session.execute(select(RoleModel.name)).scalars().all())
        for name in DEFAULT_ROLE_NAMES:
            if name not in existing:
                session.add(RoleModel(name=name))


@contextmanager
def db_session() -> Iterator[Session]:
    if _SessionLocal is None:
        init_engine()

    session: Session = _SessionLocal()  # type: ignore[misc]
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def run_in_transaction(
    work: Callable[[Session], T],
    *,
    retries: int | None = None,
) -> T:
    """
    Executa ``work`` dentro de um ``db_session`` e repete a transação inteira
    quando outra transação concorrente vence a disputa (violação de unique ou
    lock do banco). Nada da tentativa perdida fica visível.
    """
    attempts = retries or settings.rotation_retries
    for attempt in range(1, attempts):
        try:
            with db_session() as session:
                return work(session)
        except (IntegrityError, OperationalError) as exc:
            logger.warning(
                "transaction conflict, retrying attempt=%s/%s error=%s",
                attempt,
                attempts,
                exc.__class__.__name__,
            )
            time.sleep(random.uniform(0.01, 0.05) * attempt)

    with db_session() as session:
        return work(session)
