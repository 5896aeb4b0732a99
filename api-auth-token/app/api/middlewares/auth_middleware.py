# app/api/middlewares/auth_middleware.py
import logging
from functools import wraps
from typing import Any, Callable, Iterable, Mapping, TypeVar

from flask import Response

from app.api.middlewares.filter_chain import current_request_context
from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.result import AuthError, ErrorKind
from app.entities.request_context import RequestContext
from app.entities.user import AuthenticatedPrincipal
from app.infrastructure.database.session import db_session
from app.infrastructure.security.jwt_provider import INVALID_TOKEN_MESSAGE, JwtProvider
from app.repositories.role_repository import RoleRepository
from app.repositories.user_repository import UserRepository
from app.services.user_service import UserService

F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)

UNAUTHENTICATED_MESSAGE = "Full authentication is required to access this resource"
ACCESS_DENIED_MESSAGE = "Access denied"

PrincipalLoader = Callable[[str], AuthenticatedPrincipal | None]


def get_bearer_token(headers: Mapping[str, str]) -> str | None:
    auth = headers.get("Authorization", "")
    parts = auth.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def load_principal_from_db(username: str) -> AuthenticatedPrincipal | None:
    with db_session() as session:
        users = UserService(UserRepository(session), RoleRepository(session))
        return users.load_principal(username)


class JwtAuthenticationStage:
    """
    Lê o access token, valida e preenche ``ctx.principal``.

    Nunca lança por token inválido/expirado: registra o motivo em
    ``ctx.auth_failure`` e deixa a decisão para o ``AuthorizationStage``.
    """

    def __init__(
        self,
        *,
        jwt_provider: JwtProvider | None = None,
        principal_loader: PrincipalLoader = load_principal_from_db,
    ) -> None:
        self._jwt = jwt_provider or JwtProvider()
        self._load_principal = principal_loader

    def __call__(self, ctx: RequestContext, call_next) -> Response | None:
        token = get_bearer_token(ctx.headers)
        if token is None:
            return call_next(ctx)

        verified = self._jwt.verify(token, ctx.received_at)
        if not verified.ok:
            ctx.auth_failure = verified.error
            logger.info("access token rejected path=%s kind=%s", ctx.path, verified.error.kind.value)
            return call_next(ctx)

        principal = self._load_principal(verified.value)
        if principal is None:
            ctx.auth_failure = AuthError(ErrorKind.INVALID_TOKEN, INVALID_TOKEN_MESSAGE)
            logger.info("access token subject unknown path=%s", ctx.path)
            return call_next(ctx)

        ctx.principal = principal
        return call_next(ctx)


class AuthorizationStage:
    """Rejeita com 401 requisições sem principal fora das rotas públicas."""

    def __init__(self, public_paths: Iterable[str]) -> None:
        self._public_paths = tuple(public_paths)

    def is_public(self, path: str) -> bool:
        # casa por segmento: "/health" libera "/health/db", mas não "/healthz"
        for public in self._public_paths:
            base = public.rstrip("/")
            if path == base or path.startswith(base + "/"):
                return True
        return False

    def __call__(self, ctx: RequestContext, call_next) -> Response | None:
        if ctx.method == "OPTIONS" or self.is_public(ctx.path) or ctx.is_authenticated:
            return call_next(ctx)
        raise _unauthenticated(ctx)


def _unauthenticated(ctx: RequestContext) -> UnauthorizedError:
    if ctx.auth_failure is not None:
        return UnauthorizedError(ctx.auth_failure.message, kind=ctx.auth_failure.kind)
    return UnauthorizedError(UNAUTHENTICATED_MESSAGE)


def with_context(fn: F) -> F:
    """Injeta o ``RequestContext`` da requisição como primeiro argumento da rota."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        return fn(current_request_context(), *args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_auth(fn: F) -> F:
    @wraps(fn)
    def wrapper(ctx: RequestContext, *args, **kwargs):
        if not ctx.is_authenticated:
            raise _unauthenticated(ctx)
        return fn(ctx, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_roles(*allowed_roles: str):
    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(ctx: RequestContext, *args, **kwargs):
            if not ctx.is_authenticated:
                raise _unauthenticated(ctx)
            if not ctx.principal.has_any_role(*allowed_roles):
                raise ForbiddenError(ACCESS_DENIED_MESSAGE)
            return fn(ctx, *args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
