# app/api/routes/health_routes.py
from flask import Blueprint, jsonify
from sqlalchemy import select

from app.config.settings import settings
from app.infrastructure.database.models.role_model import DEFAULT_ROLE_NAMES, RoleModel
from app.infrastructure.database.session import db_session

bp_health = Blueprint("health", __name__, url_prefix="/health")


@bp_health.get("")
def health():
    return jsonify({"status": "ok", "environment": settings.environment}), 200


@bp_health.get("/db")
def health_db():
    # sem os papéis padrão o sign-up falha com ROLE_NOT_FOUND
    with db_session() as session:
        names = set(session.execute(select(RoleModel.name)).scalars().all())

    missing = sorted(set(DEFAULT_ROLE_NAMES) - names)
    if missing:
        return jsonify({"db": "degraded", "missing_roles": missing}), 503
    return jsonify({"db": "ok"}), 200
