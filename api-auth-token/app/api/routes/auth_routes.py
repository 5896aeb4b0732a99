# app/api/routes/auth_routes.py
from flask import Blueprint, jsonify, request
from sqlalchemy.orm import Session

from app.api.middlewares.auth_middleware import with_context
from app.api.schemas.auth_schema import (
    AccessTokenRequest,
    AccessTokenResponse,
    MessageResponse,
    SignInRequest,
    SignUpRequest,
    UserInfoResponse,
)
from app.config.settings import settings
from app.core.clock import utc_now
from app.entities.request_context import RequestContext
from app.infrastructure.database.session import db_session, run_in_transaction
from app.infrastructure.security.jwt_provider import JwtProvider
from app.repositories.refresh_token_repository import RefreshTokenRepository
from app.repositories.role_repository import RoleRepository
from app.repositories.user_repository import UserRepository
from app.services.auth_service import AuthService
from app.services.refresh_token_service import RefreshTokenService
from app.services.user_service import UserService

bp_auth = Blueprint("auth", __name__, url_prefix="/auth")


def build_auth_service(session: Session) -> AuthService:
    user_repo = UserRepository(session)
    return AuthService(
        jwt_provider=JwtProvider(),
        user_service=UserService(user_repo, RoleRepository(session)),
        refresh_service=RefreshTokenService(repo=RefreshTokenRepository(session), user_repo=user_repo),
    )


def _read_refresh_token() -> str:
    token = request.headers.get(settings.refresh_token_header, "")
    if not token:
        body = AccessTokenRequest.model_validate(request.get_json(silent=True) or {})
        token = body.refresh_token or ""
    return token.strip()


@bp_auth.post("/signin")
def signin():
    payload = SignInRequest.model_validate(request.get_json(silent=True) or {})
    now = utc_now()

    # conflito com sign-in simultâneo do mesmo usuário => repete a transação
    result = run_in_transaction(
        lambda session: build_auth_service(session).sign_in(
            username=payload.username, password=payload.password, now=now
        )
    )
    signed_in = result.unwrap()

    principal = signed_in.principal
    body = UserInfoResponse(
        user_id=principal.id,
        username=principal.username,
        email=principal.email,
        roles=list(principal.roles),
        access_token=signed_in.access_token,
        refresh_token=signed_in.refresh_token,
    )
    return jsonify(body.model_dump(by_alias=True)), 200


@bp_auth.post("/signup")
def signup():
    payload = SignUpRequest.model_validate(request.get_json(silent=True) or {})
    now = utc_now()

    # cadastro simultâneo com mesmo username/email viola o UNIQUE; a nova
    # tentativa refaz as verificações e devolve USERNAME_TAKEN/EMAIL_TAKEN
    result = run_in_transaction(
        lambda session: build_auth_service(session).sign_up(
            username=payload.username,
            email=str(payload.email),
            password=payload.password,
            role_names=payload.role,
            now=now,
        )
    )

    result.unwrap()
    return jsonify(MessageResponse(message="USER REGISTERED SUCCESSFULLY!").model_dump()), 200


@bp_auth.post("/signout")
@with_context
def signout(ctx: RequestContext):
    with db_session() as session:
        build_auth_service(session).sign_out(ctx.principal)

    return jsonify(MessageResponse(message="You've been signed out!").model_dump()), 200


@bp_auth.post("/access-token")
def access_token():
    refresh_token = _read_refresh_token()

    # o commit acontece antes de traduzir o erro: refresh expirado fica apagado
    with db_session() as session:
        result = build_auth_service(session).refresh_access_token(
            refresh_token=refresh_token, now=utc_now()
        )

    refreshed = result.unwrap()
    body = AccessTokenResponse(
        message="Token is refreshed successfully!",
        access_token=refreshed.access_token,
        refresh_token=refreshed.refresh_token,
    )
    return jsonify(body.model_dump(by_alias=True)), 200
