# app/infrastructure/security/jwt_provider.py

import math
from datetime import datetime, timedelta
from uuid import uuid4

import jwt

from app.config.settings import settings
from app.core.result import ErrorKind, Result

ACCESS_TOKEN_TYPE = "access"

INVALID_TOKEN_MESSAGE = "Invalid JWT token"
EXPIRED_TOKEN_MESSAGE = "JWT token is expired"


class JwtProvider:
    """
    Emite e verifica access tokens (JWT assinado, sem estado).

    O relógio é sempre recebido por parâmetro; ``verify`` não consulta a hora
    do sistema para decidir expiração.
    """

    def __init__(
        self,
        *,
        secret: str | None = None,
        access_minutes: int | None = None,
        algorithm: str | None = None,
    ) -> None:
        self._secret = secret or settings.jwt_secret
        self._issuer = settings.jwt_issuer
        self._audience = settings.jwt_audience
        self._algorithm = algorithm or settings.jwt_algorithm
        self._ttl = timedelta(minutes=access_minutes or settings.jwt_access_minutes)

    def issue(self, subject: str, now: datetime) -> str:
        # NumericDate com fração: não arredonda a emissão para o segundo
        iat = now.timestamp()
        exp = iat + self._ttl.total_seconds()

        claims = {
            "iss": self._issuer,
            "aud": self._audience,
            "sub": str(subject),
            "iat": iat,
            "exp": exp,
            "jti": uuid4().hex,
            "typ": ACCESS_TOKEN_TYPE,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str, now: datetime) -> Result[str]:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={
                    "require": ["exp", "iat", "sub", "typ"],
                    # expiração comparada com o relógio injetado logo abaixo
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidTokenError:
            return Result.failure(ErrorKind.INVALID_TOKEN, INVALID_TOKEN_MESSAGE)

        if claims.get("typ") != ACCESS_TOKEN_TYPE:
            return Result.failure(ErrorKind.INVALID_TOKEN, INVALID_TOKEN_MESSAGE)

        try:
            exp = float(claims["exp"])
        except (TypeError, ValueError):
            return Result.failure(ErrorKind.INVALID_TOKEN, INVALID_TOKEN_MESSAGE)
        if not math.isfinite(exp):
            return Result.failure(ErrorKind.INVALID_TOKEN, INVALID_TOKEN_MESSAGE)

        if exp <= now.timestamp():
            return Result.failure(ErrorKind.EXPIRED_TOKEN, EXPIRED_TOKEN_MESSAGE)

        subject = claims.get("sub")
        if not subject:
            return Result.failure(ErrorKind.INVALID_TOKEN, INVALID_TOKEN_MESSAGE)
        return Result.success(str(subject))
