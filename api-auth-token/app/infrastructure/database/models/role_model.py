from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.database.base_model import BaseModel

ROLE_USER = "ROLE_USER"
ROLE_MODERATOR = "ROLE_MODERATOR"
ROLE_ADMIN = "ROLE_ADMIN"

DEFAULT_ROLE_NAMES = (ROLE_USER, ROLE_MODERATOR, ROLE_ADMIN)


class RoleModel(BaseModel):
    __tablename__ = "tbRoles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
