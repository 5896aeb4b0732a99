# app/services/refresh_token_service.py

import logging
import secrets
from datetime import datetime, timedelta

from app.config.settings import settings
from app.core.clock import to_naive_utc
from app.core.result import ErrorKind, Result
from app.infrastructure.database.models.refresh_token_model import RefreshTokenModel
from app.repositories.refresh_token_repository import RefreshTokenRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

REFRESH_TOKEN_NOT_FOUND_MESSAGE = "Refresh token is not in database!"
REFRESH_TOKEN_EXPIRED_MESSAGE = "Refresh token was expired. Please make a new signin request"


def _new_token_value() -> str:
    return secrets.token_urlsafe(32)


class RefreshTokenService:
    """
    Ciclo de vida do refresh token: um único token vivo por usuário.

    Todas as operações rodam dentro da transação da sessão recebida pelos
    repositórios; quem chama decide o limite transacional (ver
    ``run_in_transaction``).
    """

    def __init__(
        self,
        *,
        repo: RefreshTokenRepository,
        user_repo: UserRepository,
        refresh_minutes: int | None = None,
    ) -> None:
        self._repo = repo
        self._user_repo = user_repo
        self._ttl = timedelta(minutes=refresh_minutes or settings.jwt_refresh_minutes)

    def find_by_token(self, token: str) -> Result[RefreshTokenModel]:
        stored = self._repo.find_by_token(token)
        if stored is None:
            return Result.failure(ErrorKind.REFRESH_TOKEN_NOT_FOUND, REFRESH_TOKEN_NOT_FOUND_MESSAGE)
        return Result.success(stored)

    def issue(self, user_id: int, now: datetime) -> RefreshTokenModel:
        # trava a linha do usuário: duas emissões simultâneas não se intercalam
        self._user_repo.lock_by_id(user_id)
        self._repo.delete_by_user(user_id)

        model = RefreshTokenModel(
            user_id=user_id,
            token=_new_token_value(),
            expiry_date=to_naive_utc(now) + self._ttl,
        )
        return self._repo.save(model)

    def verify_not_expired(self, token: RefreshTokenModel, now: datetime) -> Result[RefreshTokenModel]:
        if token.is_expired(to_naive_utc(now)):
            self._repo.delete(token)
            logger.info("refresh token expired and removed user_id=%s", token.user_id)
            return Result.failure(ErrorKind.REFRESH_TOKEN_EXPIRED, REFRESH_TOKEN_EXPIRED_MESSAGE)
        return Result.success(token)

    def rotate(self, user_id: int, now: datetime) -> RefreshTokenModel:
        self._user_repo.lock_by_id(user_id)
        prior = self._repo.find_by_user(user_id)
        if prior is not None:
            # token expirado já sai aqui; vivo ou não, é substituído em seguida
            self.verify_not_expired(prior, now)

        issued = self.issue(user_id, now)
        logger.info("refresh token rotated user_id=%s replaced=%s", user_id, prior is not None)
        return issued

    def revoke(self, user_id: int) -> int:
        removed = self._repo.delete_by_user(user_id)
        if removed:
            logger.info("refresh token revoked user_id=%s", user_id)
        return removed
