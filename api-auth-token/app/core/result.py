# app/core/result.py
"""
Tipos de resultado usados pelo núcleo de autenticação.

Serviços e provedores retornam ``Result`` em vez de lançar exceções para
falhas esperadas (credencial errada, token expirado, refresh inexistente...).
A borda HTTP converte um ``Result`` com erro em ``AppError`` via
``app.core.exceptions.raise_for_error``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    BAD_CREDENTIALS = "bad_credentials"
    USERNAME_TAKEN = "username_taken"
    EMAIL_TAKEN = "email_taken"
    ROLE_NOT_FOUND = "role_not_found"
    INVALID_TOKEN = "invalid_token"
    EXPIRED_TOKEN = "expired_token"
    UNAUTHENTICATED = "unauthenticated"
    ACCESS_DENIED = "access_denied"
    REFRESH_TOKEN_EMPTY = "refresh_token_empty"
    REFRESH_TOKEN_NOT_FOUND = "refresh_token_not_found"
    REFRESH_TOKEN_EXPIRED = "refresh_token_expired"
    VALIDATION = "validation_error"


@dataclass(frozen=True)
class AuthError:
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class Result(Generic[T]):
    value: T | None = None
    error: AuthError | None = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "Result[T]":
        return cls(error=AuthError(kind=kind, message=message))

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Retorna o valor ou lança o ``AppError`` correspondente ao erro."""
        if self.error is not None:
            from app.core.exceptions import raise_for_error

            raise_for_error(self.error)
        return self.value  # type: ignore[return-value]
