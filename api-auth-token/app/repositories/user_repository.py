# app/repositories/user_repository.py

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.base_repository import BaseRepository
from app.infrastructure.database.models.user_model import UserModel


class UserRepository(BaseRepository[UserModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def get_by_username(self, username: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.username == username)
        return self._session.execute(stmt).scalar_one_or_none()

    def lock_by_id(self, user_id: int) -> UserModel | None:
        # serializa escritas concorrentes do mesmo usuário (ignorado pelo SQLite)
        stmt = select(UserModel).where(UserModel.id == user_id).with_for_update()
        return self._session.execute(stmt).scalar_one_or_none()

    def exists_by_username(self, username: str) -> bool:
        stmt = select(UserModel.id).where(UserModel.username == username)
        return self._session.execute(stmt).first() is not None

    def exists_by_email(self, email: str) -> bool:
        stmt = select(UserModel.id).where(UserModel.email == email)
        return self._session.execute(stmt).first() is not None
