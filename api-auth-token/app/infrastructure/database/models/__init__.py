# app/infrastructure/database/models/__init__.py
from app.infrastructure.database.models.refresh_token_model import RefreshTokenModel
from app.infrastructure.database.models.role_model import RoleModel
from app.infrastructure.database.models.user_model import UserModel, user_roles

__all__ = ["RefreshTokenModel", "RoleModel", "UserModel", "user_roles"]
