from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Iterator

# antes de importar app.*: o singleton de settings lê o ambiente no import
os.environ["DEBUG"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["JWT_SECRET"] = "test-secret-with-enough-length-for-hs256"

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402
from sqlalchemy import func, select  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from app.config.settings import settings  # noqa: E402
from app.infrastructure.database.models.refresh_token_model import RefreshTokenModel  # noqa: E402
from app.infrastructure.database.session import db_session, get_engine  # noqa: E402
from app.main import create_app  # noqa: E402
from app.repositories.refresh_token_repository import RefreshTokenRepository  # noqa: E402
from app.repositories.role_repository import RoleRepository  # noqa: E402
from app.repositories.user_repository import UserRepository  # noqa: E402
from app.services.auth_service import AuthService  # noqa: E402
from app.services.refresh_token_service import RefreshTokenService  # noqa: E402
from app.services.user_service import UserService  # noqa: E402
from app.infrastructure.security.jwt_provider import JwtProvider  # noqa: E402

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def app(tmp_path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Flask]:
    monkeypatch.setattr(settings, "password_iterations", 1_000)
    application = create_app(database_url=f"sqlite:///{tmp_path / 'auth.db'}")
    application.config["TESTING"] = True
    yield application
    get_engine().dispose()


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()


def build_services(session: Session) -> tuple[AuthService, RefreshTokenService, UserService]:
    user_repo = UserRepository(session)
    users = UserService(user_repo, RoleRepository(session))
    refresh = RefreshTokenService(repo=RefreshTokenRepository(session), user_repo=user_repo)
    auth = AuthService(jwt_provider=JwtProvider(), user_service=users, refresh_service=refresh)
    return auth, refresh, users


def register_user(
    username: str = "alice",
    *,
    email: str | None = None,
    password: str = "secret123",
    roles: set[str] | None = None,
) -> int:
    with db_session() as session:
        auth, _, _ = build_services(session)
        result = auth.sign_up(
            username=username,
            email=email or f"{username}@example.com",
            password=password,
            role_names=roles,
            now=T0,
        )
    return result.unwrap()


def refresh_rows(user_id: int) -> int:
    with db_session() as session:
        stmt = select(func.count(RefreshTokenModel.id)).where(RefreshTokenModel.user_id == user_id)
        return int(session.execute(stmt).scalar_one())


@pytest.fixture
def user_id(app: Flask) -> int:
    return register_user()
