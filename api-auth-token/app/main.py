# app/main.py
from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from app.api.middlewares.auth_middleware import AuthorizationStage, JwtAuthenticationStage
from app.api.middlewares.error_handler import ExceptionTranslationStage, register_error_handlers
from app.api.middlewares.filter_chain import FilterChain, install_filter_chain
from app.api.middlewares.request_logging import register_request_logging
from app.api.routes import register_routes
from app.config.flask_config import configure_app
from app.config.settings import settings
from app.core.logging import setup_logging
from app.infrastructure.database.session import init_db, init_engine
from app.infrastructure.security.jwt_provider import JwtProvider


def build_filter_chain() -> FilterChain:
    # ordem explícita: tradução de exceções envolve autenticação, que vem
    # antes da checagem de acesso
    return FilterChain(
        [
            ExceptionTranslationStage(),
            JwtAuthenticationStage(jwt_provider=JwtProvider()),
            AuthorizationStage(settings.public_path_list),
        ]
    )


def create_app(*, database_url: str | None = None, create_schema: bool = True) -> Flask:
    setup_logging(settings.log_level)

    app = Flask(__name__)

    api_prefix = settings.api_prefix.rstrip("/")
    CORS(
        app,
        resources={rf"{api_prefix}/*": {"origins": settings.cors_origin_list}},
        allow_headers=["Content-Type", "Authorization", settings.refresh_token_header],
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    )

    configure_app(app)

    init_engine(database_url)
    if create_schema:
        init_db()

    install_filter_chain(app, build_filter_chain())
    register_request_logging(app)

    register_routes(app, api_prefix=api_prefix)

    register_error_handlers(app)

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=settings.debug)
