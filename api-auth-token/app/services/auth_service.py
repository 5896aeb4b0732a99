# app/services/auth_service.py

import logging
from dataclasses import dataclass
from datetime import datetime

from app.core.clock import to_naive_utc
from app.core.result import ErrorKind, Result
from app.entities.user import AuthenticatedPrincipal
from app.infrastructure.database.models.role_model import ROLE_ADMIN, ROLE_MODERATOR, ROLE_USER, RoleModel
from app.infrastructure.security.jwt_provider import JwtProvider
from app.services.refresh_token_service import RefreshTokenService
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

USERNAME_TAKEN_MESSAGE = "ERROR : USERNAME IS ALREADY TAKEN"
EMAIL_TAKEN_MESSAGE = "Error: Email is already in use!"

# apelidos aceitos no cadastro; qualquer outro valor vira ROLE_USER
ROLE_ALIASES = {
    "admin": ROLE_ADMIN,
    "mod": ROLE_MODERATOR,
}


@dataclass(frozen=True)
class SignInResult:
    principal: AuthenticatedPrincipal
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class AccessTokenRefreshResult:
    access_token: str
    refresh_token: str


def resolve_role_names(requested: set[str] | None) -> set[str]:
    if not requested:
        return {ROLE_USER}
    return {ROLE_ALIASES.get(name, ROLE_USER) for name in requested}


class AuthService:
    def __init__(
        self,
        *,
        jwt_provider: JwtProvider,
        user_service: UserService,
        refresh_service: RefreshTokenService,
    ) -> None:
        self._jwt = jwt_provider
        self._users = user_service
        self._refresh = refresh_service

    def sign_in(self, *, username: str, password: str, now: datetime) -> Result[SignInResult]:
        auth = self._users.authenticate(username=username, password=password)
        if not auth.ok:
            logger.info("sign-in rejected username=%s", username)
            return Result(error=auth.error)

        principal = auth.value
        refresh = self._refresh.rotate(principal.id, now)
        access = self._jwt.issue(principal.username, now)

        logger.info("sign-in ok user_id=%s", principal.id)
        return Result.success(
            SignInResult(principal=principal, access_token=access, refresh_token=refresh.token)
        )

    def sign_up(
        self,
        *,
        username: str,
        email: str,
        password: str,
        role_names: set[str] | None,
        now: datetime,
    ) -> Result[int]:
        if self._users.exists_by_username(username):
            return Result.failure(ErrorKind.USERNAME_TAKEN, USERNAME_TAKEN_MESSAGE)
        if self._users.exists_by_email(email):
            return Result.failure(ErrorKind.EMAIL_TAKEN, EMAIL_TAKEN_MESSAGE)

        roles: list[RoleModel] = []
        for name in sorted(resolve_role_names(role_names)):
            found = self._users.find_role_by_name(name)
            if not found.ok:
                logger.error("role missing from database role=%s", name)
                return Result(error=found.error)
            roles.append(found.value)

        user = self._users.create_user(
            username=username,
            email=email,
            password=password,
            roles=roles,
            now=to_naive_utc(now),
        )
        logger.info("user registered user_id=%s roles=%s", user.id, user.role_names)
        return Result.success(user.id)

    def sign_out(self, principal: AuthenticatedPrincipal | None) -> int:
        if principal is None:
            return 0
        return self._refresh.revoke(principal.id)

    def refresh_access_token(self, *, refresh_token: str, now: datetime) -> Result[AccessTokenRefreshResult]:
        if not refresh_token:
            return Result.failure(ErrorKind.REFRESH_TOKEN_EMPTY, "Refresh Token is empty!")

        found = self._refresh.find_by_token(refresh_token)
        if not found.ok:
            return Result(error=found.error)

        checked = self._refresh.verify_not_expired(found.value, now)
        if not checked.ok:
            return Result(error=checked.error)

        stored = checked.value
        access = self._jwt.issue(stored.user.username, now)
        # o refresh token não é rotacionado aqui, só no sign-in
        return Result.success(AccessTokenRefreshResult(access_token=access, refresh_token=stored.token))
