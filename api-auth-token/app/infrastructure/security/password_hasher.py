# app/infrastructure/security/password_hasher.py
import base64
import binascii
import hashlib
import hmac
import os
from typing import NamedTuple

from app.config.settings import settings

MIN_PASSWORD_LENGTH = 6


class PasswordDigest(NamedTuple):
    password_hash: str
    password_salt: str
    algo: str
    iterations: int


class PasswordHasher:
    DEFAULT_ALGO = "pbkdf2_sha256"
    SALT_BYTES = 16

    @classmethod
    def hash_password(cls, password: str, *, iterations: int | None = None) -> PasswordDigest:
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must have at least {MIN_PASSWORD_LENGTH} characters.")

        it = iterations or settings.password_iterations
        salt = os.urandom(cls.SALT_BYTES)
        dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, it)

        return PasswordDigest(
            password_hash=base64.b64encode(dk).decode("utf-8"),
            password_salt=base64.b64encode(salt).decode("utf-8"),
            algo=cls.DEFAULT_ALGO,
            iterations=it,
        )

    @classmethod
    def verify_password(
        cls,
        password: str,
        *,
        password_hash: str,
        password_salt: str,
        iterations: int,
        algo: str,
    ) -> bool:
        if algo != cls.DEFAULT_ALGO:
            return False

        try:
            salt = base64.b64decode(password_salt.encode("utf-8"), validate=True)
            expected = base64.b64decode(password_hash.encode("utf-8"), validate=True)
        except (binascii.Error, ValueError):
            return False

        dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
        return hmac.compare_digest(dk, expected)
