# app/api/routes/__init__.py

from flask import Flask

from app.api.routes.auth_routes import bp_auth
from app.api.routes.health_routes import bp_health
from app.api.routes.test_routes import bp_test


def register_routes(app: Flask, *, api_prefix: str) -> None:
    # health fora de /api
    app.register_blueprint(bp_health, url_prefix="/health")

    app.register_blueprint(bp_auth, url_prefix=f"{api_prefix}/auth")
    app.register_blueprint(bp_test, url_prefix=f"{api_prefix}/test")
