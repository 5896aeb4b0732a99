from __future__ import annotations

from datetime import timedelta

from flask import Flask
from flask.testing import FlaskClient

from app.api.middlewares.auth_middleware import AuthorizationStage, JwtAuthenticationStage
from app.api.middlewares.error_handler import ExceptionTranslationStage, register_error_handlers
from app.api.middlewares.filter_chain import FilterChain, install_filter_chain
from app.core.clock import utc_now
from app.core.exceptions import TokenRefreshError
from app.entities.request_context import RequestContext
from app.entities.user import AuthenticatedPrincipal
from app.infrastructure.security.jwt_provider import JwtProvider

from conftest import register_user

SECRET = "filter-chain-secret-with-enough-length"


def _ctx(**overrides) -> RequestContext:
    values = dict(path="/api/test/user", method="GET", headers={}, received_at=utc_now())
    values.update(overrides)
    return RequestContext(**values)


def test_stages_run_in_declared_order() -> None:
    calls: list[str] = []

    def stage(name):
        def run(ctx, call_next):
            calls.append(f"{name}:before")
            out = call_next(ctx)
            calls.append(f"{name}:after")
            return out

        return run

    result = FilterChain([stage("a"), stage("b"), stage("c")]).handle(_ctx())

    assert result is None
    assert calls == ["a:before", "b:before", "c:before", "c:after", "b:after", "a:after"]


def test_stage_can_short_circuit_chain() -> None:
    calls: list[str] = []

    def stop(ctx, call_next):
        calls.append("stop")
        return "halt"

    def never(ctx, call_next):
        calls.append("never")
        return call_next(ctx)

    assert FilterChain([stop, never]).handle(_ctx()) == "halt"
    assert calls == ["stop"]


def test_jwt_stage_attaches_principal_for_valid_token() -> None:
    provider = JwtProvider(secret=SECRET)
    principal = AuthenticatedPrincipal(id=7, username="alice", email="a@example.com", roles=("ROLE_USER",))
    stage = JwtAuthenticationStage(jwt_provider=provider, principal_loader=lambda name: principal)
    ctx = _ctx()
    ctx.headers = {"Authorization": f"Bearer {provider.issue('alice', ctx.received_at)}"}

    stage(ctx, lambda c: None)

    assert ctx.principal == principal
    assert ctx.auth_failure is None


def test_jwt_stage_records_expired_token_without_raising() -> None:
    provider = JwtProvider(secret=SECRET, access_minutes=1)
    stage = JwtAuthenticationStage(jwt_provider=provider, principal_loader=lambda name: None)
    ctx = _ctx()
    old = provider.issue("alice", ctx.received_at - timedelta(minutes=5))
    ctx.headers = {"Authorization": f"Bearer {old}"}
    reached: list[bool] = []

    stage(ctx, lambda c: reached.append(True))

    assert reached == [True]
    assert ctx.principal is None
    assert ctx.auth_failure.kind.value == "expired_token"


def test_jwt_stage_treats_unknown_subject_as_invalid() -> None:
    provider = JwtProvider(secret=SECRET)
    stage = JwtAuthenticationStage(jwt_provider=provider, principal_loader=lambda name: None)
    ctx = _ctx()
    ctx.headers = {"Authorization": f"Bearer {provider.issue('ghost', ctx.received_at)}"}

    stage(ctx, lambda c: None)

    assert ctx.principal is None
    assert ctx.auth_failure.kind.value == "invalid_token"


def test_authorization_stage_public_prefixes() -> None:
    stage = AuthorizationStage(["/api/auth/", "/health"])

    assert stage.is_public("/api/auth/signin")
    assert stage.is_public("/health")
    assert stage.is_public("/health/db")
    assert not stage.is_public("/api/test/user")
    assert not stage.is_public("/healthz")
    assert not stage.is_public("/api/authx/signin")


def test_authorization_stage_does_not_extend_public_path_to_siblings() -> None:
    stage = AuthorizationStage(["/api/test/all"])

    assert stage.is_public("/api/test/all")
    assert stage.is_public("/api/test/all/")
    assert not stage.is_public("/api/test/allx")


def _mini_app(stages) -> Flask:
    app = Flask(__name__)
    install_filter_chain(app, FilterChain(stages))
    register_error_handlers(app)

    @app.get("/api/private")
    def private():
        return {"ok": True}

    return app


def test_translation_stage_turns_any_downstream_exception_into_json() -> None:
    def explode(ctx, call_next):
        raise KeyError("boom")

    client = _mini_app([ExceptionTranslationStage(), explode]).test_client()

    resp = client.get("/api/private")

    body = resp.get_json()
    assert resp.status_code == 500
    assert body["message"] == "Internal server error"
    assert body["path"] == "/api/private"
    assert "boom" not in resp.get_data(as_text=True)


def test_translation_stage_keeps_app_error_status() -> None:
    def deny(ctx, call_next):
        raise TokenRefreshError("Refresh token is not in database!")

    client = _mini_app([ExceptionTranslationStage(), deny]).test_client()

    resp = client.get("/api/private")

    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Refresh token is not in database!"


def test_protected_route_without_token_returns_401(client: FlaskClient) -> None:
    resp = client.get("/api/test/user")

    body = resp.get_json()
    assert resp.status_code == 401
    assert body["error"] == "unauthenticated"
    assert body["path"] == "/api/test/user"
    assert set(body) >= {"path", "message", "status", "timestamp"}


def test_protected_route_with_garbage_token_returns_invalid_token(client: FlaskClient) -> None:
    resp = client.get("/api/test/user", headers={"Authorization": "Bearer not.a.jwt"})

    assert resp.status_code == 401
    assert resp.get_json()["error"] == "invalid_token"


def test_protected_route_with_expired_token_returns_expired_token(client: FlaskClient, user_id: int) -> None:
    expired = JwtProvider().issue("alice", utc_now() - timedelta(days=1))

    resp = client.get("/api/test/user", headers={"Authorization": f"Bearer {expired}"})

    assert resp.status_code == 401
    assert resp.get_json()["error"] == "expired_token"
    assert resp.get_json()["message"] == "JWT token is expired"


def test_protected_route_with_valid_token(client: FlaskClient, user_id: int) -> None:
    token = JwtProvider().issue("alice", utc_now())

    resp = client.get("/api/test/user", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200
    assert resp.get_json()["username"] == "alice"


def test_role_guard_returns_403_for_missing_role(client: FlaskClient, user_id: int) -> None:
    token = JwtProvider().issue("alice", utc_now())

    resp = client.get("/api/test/admin", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 403
    assert resp.get_json()["error"] == "access_denied"


def test_role_guard_allows_admin(client: FlaskClient) -> None:
    register_user("root", roles={"admin"})
    token = JwtProvider().issue("root", utc_now())

    resp = client.get("/api/test/admin", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200


def test_public_route_ignores_bad_token(client: FlaskClient) -> None:
    resp = client.get("/api/test/all", headers={"Authorization": "Bearer garbage"})

    assert resp.status_code == 200
    assert resp.get_json() == {"message": "Public Content."}


def test_me_returns_principal(client: FlaskClient, user_id: int) -> None:
    token = JwtProvider().issue("alice", utc_now())

    resp = client.get("/api/test/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.get_json() == {
        "id": user_id,
        "username": "alice",
        "email": "alice@example.com",
        "roles": ["ROLE_USER"],
    }


def test_health_db_reports_seeded_roles(client: FlaskClient) -> None:
    assert client.get("/health").status_code == 200
    assert client.get("/health/db").get_json() == {"db": "ok"}


def test_health_lookalike_path_is_not_public(client: FlaskClient) -> None:
    resp = client.get("/healthz")

    assert resp.status_code == 401
    assert resp.get_json()["error"] == "unauthenticated"


def test_json_responses_keep_declared_key_order(app: Flask, client: FlaskClient) -> None:
    resp = client.get("/api/test/user")

    assert app.json.sort_keys is False
    assert list(resp.get_json()) == ["path", "message", "status", "timestamp", "error"]
