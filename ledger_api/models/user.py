from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column
from ledger_api.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """
    Tracks users from the external identity provider.

    Only stores user_id (sub from JWT) - no auth credentials.
    Auto-created on first API request with valid JWT.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    auth_user_id: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    # auth_user_id is the 'sub' claim from JWT

    def __repr__(self) -> str:
        return f"<User(id={self.id}, auth_user_id='{self.auth_user_id}')>"
