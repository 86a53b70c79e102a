from sqlalchemy import String, Integer, ForeignKey, Index, CheckConstraint, text
from sqlalchemy.orm import Mapped, mapped_column
from ledger_api.models.base import Base, TimestampMixin, SoftDeleteMixin


class Payee(Base, TimestampMixin, SoftDeleteMixin):
    """Who a transaction was paid to (or received from)."""

    __tablename__ = "payees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        Index(
            "uq_payees_user_name",
            "user_id",
            "name",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
        CheckConstraint("length(name) >= 1", name="ck_payees_name_length"),
    )

    def __repr__(self) -> str:
        return f"<Payee(id={self.id}, name='{self.name}')>"
