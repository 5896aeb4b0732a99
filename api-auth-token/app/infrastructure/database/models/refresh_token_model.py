# app/infrastructure/database/models/refresh_token_model.py

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.infrastructure.database.base_model import BaseModel
from app.infrastructure.database.models.user_model import UserModel


class RefreshTokenModel(BaseModel):
    __tablename__ = "tbRefreshTokens"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)

    # no máximo um refresh token vivo por usuário
    user_id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        ForeignKey("tbUsers.id"),
        nullable=False,
        unique=True,
    )

    token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    expiry_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    user: Mapped[UserModel] = relationship(lazy="joined")

    def is_expired(self, now: datetime) -> bool:
        return self.expiry_date < now
