# app/repositories/role_repository.py

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.base_repository import BaseRepository
from app.infrastructure.database.models.role_model import RoleModel


class RoleRepository(BaseRepository[RoleModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def get_by_name(self, name: str) -> RoleModel | None:
        stmt = select(RoleModel).where(RoleModel.name == name)
        return self._session.execute(stmt).scalar_one_or_none()
