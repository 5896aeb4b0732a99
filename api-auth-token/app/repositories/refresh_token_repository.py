# app/repositories/refresh_token_repository.py

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.core.base_repository import BaseRepository
from app.infrastructure.database.models.refresh_token_model import RefreshTokenModel


class RefreshTokenRepository(BaseRepository[RefreshTokenModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def find_by_token(self, token: str) -> RefreshTokenModel | None:
        stmt = select(RefreshTokenModel).where(RefreshTokenModel.token == token)
        return self._session.execute(stmt).unique().scalar_one_or_none()

    def find_by_user(self, user_id: int) -> RefreshTokenModel | None:
        stmt = select(RefreshTokenModel).where(RefreshTokenModel.user_id == user_id)
        return self._session.execute(stmt).unique().scalar_one_or_none()

    def save(self, model: RefreshTokenModel) -> RefreshTokenModel:
        return self.add(model)

    def delete_by_user(self, user_id: int) -> int:
        stmt = delete(RefreshTokenModel).where(RefreshTokenModel.user_id == user_id)
        result = self._session.execute(stmt)
        return int(result.rowcount or 0)

    def delete(self, model: RefreshTokenModel) -> None:
        stmt = delete(RefreshTokenModel).where(RefreshTokenModel.id == model.id)
        self._session.execute(stmt)
