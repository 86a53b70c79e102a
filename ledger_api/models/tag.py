from sqlalchemy import String, Integer, ForeignKey, Index, CheckConstraint, text
from sqlalchemy.orm import Mapped, mapped_column
from ledger_api.models.base import Base, TimestampMixin, SoftDeleteMixin


def normalize_tag_name(name: str) -> str:
    return name.strip().lower()


class Tag(Base, TimestampMixin, SoftDeleteMixin):
    """
    Free-form label attached to line items.

    Names are stored trimmed and lowercased, which makes uniqueness
    case-insensitive. usage_count tracks the number of line-item
    associations and is maintained by the transaction write path.
    """

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index(
            "uq_tags_user_name",
            "user_id",
            "name",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
        CheckConstraint("length(name) >= 1 AND length(name) <= 50", name="ck_tags_name_length"),
        CheckConstraint("usage_count >= 0", name="ck_tags_usage_count"),
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}', usage_count={self.usage_count})>"
