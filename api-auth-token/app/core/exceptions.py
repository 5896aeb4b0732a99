# app/core/exceptions.py
from typing import NoReturn

from app.core.result import AuthError, ErrorKind


class AppError(Exception):
    def __init__(self, message: str, *, status_code: int = 400, kind: ErrorKind | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.kind = kind


class BadRequestError(AppError):
    def __init__(self, message: str = "Bad request", *, kind: ErrorKind | None = None) -> None:
        super().__init__(message, status_code=400, kind=kind)


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Unauthorized", *, kind: ErrorKind = ErrorKind.UNAUTHENTICATED) -> None:
        super().__init__(message, status_code=401, kind=kind)


class ForbiddenError(AppError):
    def __init__(self, message: str = "Forbidden", *, kind: ErrorKind = ErrorKind.ACCESS_DENIED) -> None:
        super().__init__(message, status_code=403, kind=kind)


class TokenRefreshError(ForbiddenError):
    """Refresh token ausente no banco ou expirado: o cliente deve logar de novo."""


class ConfigurationError(AppError):
    def __init__(self, message: str, *, kind: ErrorKind | None = None) -> None:
        super().__init__(message, status_code=500, kind=kind)


_ERRORS_BY_KIND: dict[ErrorKind, type[AppError]] = {
    ErrorKind.BAD_CREDENTIALS: UnauthorizedError,
    ErrorKind.INVALID_TOKEN: UnauthorizedError,
    ErrorKind.EXPIRED_TOKEN: UnauthorizedError,
    ErrorKind.UNAUTHENTICATED: UnauthorizedError,
    ErrorKind.USERNAME_TAKEN: BadRequestError,
    ErrorKind.EMAIL_TAKEN: BadRequestError,
    ErrorKind.REFRESH_TOKEN_EMPTY: BadRequestError,
    ErrorKind.VALIDATION: BadRequestError,
    ErrorKind.ACCESS_DENIED: ForbiddenError,
    ErrorKind.REFRESH_TOKEN_NOT_FOUND: TokenRefreshError,
    ErrorKind.REFRESH_TOKEN_EXPIRED: TokenRefreshError,
    ErrorKind.ROLE_NOT_FOUND: ConfigurationError,
}


def to_app_error(error: AuthError) -> AppError:
    cls = _ERRORS_BY_KIND.get(error.kind, AppError)
    return cls(error.message, kind=error.kind)


def raise_for_error(error: AuthError) -> NoReturn:
    raise to_app_error(error)
