from typing import Optional
from sqlalchemy import String, Integer, ForeignKey, Index, CheckConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ledger_api.models.base import Base, TimestampMixin, SoftDeleteMixin

FULL_NAME_SEPARATOR = ":"


def build_full_name(name: str, parent_name: str | None = None) -> str:
    """Lowercased "parent:child" path used for reporting snapshots."""
    if parent_name is None:
        return name.lower()
    return f"{parent_name}{FULL_NAME_SEPARATOR}{name}".lower()


class Category(Base, TimestampMixin, SoftDeleteMixin):
    """
    Two-level category tree.

    A category with a parent is a subcategory and can never be a parent
    itself (enforced by the category service).

    full_name is "name" for top-level categories and "parent:name" for
    subcategories, always lowercased. It is copied onto transaction splits.
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    full_name: Mapped[str] = mapped_column(String(511), nullable=False)

    # Relationships
    parent: Mapped[Optional["Category"]] = relationship("Category", remote_side="Category.id")

    __table_args__ = (
        Index(
            "uq_categories_user_full_name",
            "user_id",
            "full_name",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
        Index("ix_categories_user_parent", "user_id", "parent_id"),
        CheckConstraint("length(name) >= 1", name="ck_categories_name_length"),
    )

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, full_name='{self.full_name}')>"
