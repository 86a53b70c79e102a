from enum import Enum as PyEnum
from sqlalchemy import String, Integer, ForeignKey, Enum, Index, CheckConstraint, text
from sqlalchemy.orm import Mapped, mapped_column
from ledger_api.models.base import Base, TimestampMixin, SoftDeleteMixin


class CurrencyType(str, PyEnum):
    """Currencies an account can be held in"""

    USD = "USD"
    CAD = "CAD"
    INR = "INR"


class FinancialAccount(Base, TimestampMixin, SoftDeleteMixin):
    """
    Financial accounts owned by users.

    Account name and currency are copied onto each transaction at write time;
    renames are pushed to those copies by the account service.
    """

    __tablename__ = "financial_accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,  # Every query is scoped by owner
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    currency_type: Mapped[CurrencyType] = mapped_column(
        Enum(CurrencyType, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )

    __table_args__ = (
        # Unique among live rows so a soft-deleted name can be reused
        Index(
            "uq_financial_accounts_user_name",
            "user_id",
            "name",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
        CheckConstraint("length(name) >= 1", name="ck_financial_accounts_name_length"),
    )

    def __repr__(self) -> str:
        return f"<FinancialAccount(id={self.id}, name='{self.name}', currency={self.currency_type.value})>"
