import datetime
from enum import Enum as PyEnum
from sqlalchemy import (
    String,
    Integer,
    BigInteger,
    ForeignKey,
    Date,
    Text,
    Enum,
    Index,
    Table,
    Column,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ledger_api.models.base import Base, TimestampMixin, SoftDeleteMixin
from ledger_api.models.tag import Tag


class TransactionType(str, PyEnum):
    """Direction of money for a transaction"""

    EXPENSE = "EXPENSE"
    INCOME = "INCOME"


line_item_tags = Table(
    "line_item_tags",
    Base.metadata,
    Column(
        "line_item_id",
        Integer,
        ForeignKey("line_items.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Transaction(Base, TimestampMixin, SoftDeleteMixin):
    """
    A dated payment to or from a payee on one account.

    Amounts are integer minor units (cents). total_amount, split_count and
    category_name are derived from the splits and rewritten by the
    transaction service whenever the splits change. account_name,
    currency_code and payee_name are copies taken at write time.
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    financial_account_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("financial_accounts.id", ondelete="RESTRICT"),
        nullable=False,
    )
    payee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("payees.id", ondelete="RESTRICT"),
        nullable=False,
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    memo: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_amount: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    split_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Denormalized copies
    account_name: Mapped[str] = mapped_column(String(255), nullable=False)
    currency_code: Mapped[str] = mapped_column(String(3), nullable=False)
    payee_name: Mapped[str] = mapped_column(String(255), nullable=False)
    category_name: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    splits: Mapped[list["TransactionSplit"]] = relationship(
        "TransactionSplit",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionSplit.sort_order",
    )

    # Composite indexes for common queries
    __table_args__ = (
        Index("ix_transactions_user_account_date", "user_id", "financial_account_id", "date"),
        Index("ix_transactions_user_payee_date", "user_id", "payee_id", "date"),
        Index("ix_transactions_user_type_date", "user_id", "type", "date"),
        CheckConstraint("total_amount >= 0", name="ck_transactions_total_amount"),
        CheckConstraint("split_count >= 1", name="ck_transactions_split_count"),
    )


class TransactionSplit(Base):
    """Portion of a transaction attributed to one category."""

    __tablename__ = "transaction_splits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    transaction_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("transactions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=False,
        index=True,
    )
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    memo: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_full_name: Mapped[str] = mapped_column(String(511), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    transaction: Mapped["Transaction"] = relationship("Transaction", back_populates="splits")
    line_items: Mapped[list["LineItem"]] = relationship(
        "LineItem",
        back_populates="split",
        cascade="all, delete-orphan",
        order_by="LineItem.sort_order",
    )

    __table_args__ = (CheckConstraint("amount > 0", name="ck_transaction_splits_amount"),)


class LineItem(Base):
    """Sub-component of a split; line item amounts sum to the split amount."""

    __tablename__ = "line_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    split_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("transaction_splits.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    memo: Mapped[str | None] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    split: Mapped["TransactionSplit"] = relationship("TransactionSplit", back_populates="line_items")
    tags: Mapped[list[Tag]] = relationship(Tag, secondary=line_item_tags)

    __table_args__ = (CheckConstraint("amount > 0", name="ck_line_items_amount"),)
