from sqlalchemy.orm import Session
from ledger_api.models.tag import Tag


class TagRepository:
    """Repository for Tag operations scoped to a user"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: int) -> list[Tag]:
        """Get live tags, most used first"""
        return (
            self.db.query(Tag)
            .filter(Tag.user_id == user_id, Tag.deleted_at.is_(None))
            .order_by(Tag.usage_count.desc(), Tag.name.asc())
            .all()
        )

    def get_by_id_and_user(self, tag_id: int, user_id: int) -> Tag | None:
        return (
            self.db.query(Tag)
            .filter(Tag.id == tag_id, Tag.user_id == user_id, Tag.deleted_at.is_(None))
            .first()
        )

    def get_by_name(self, name: str, user_id: int) -> Tag | None:
        """Lookup by already-normalized name"""
        return (
            self.db.query(Tag)
            .filter(Tag.name == name, Tag.user_id == user_id, Tag.deleted_at.is_(None))
            .first()
        )

    def create(self, tag: Tag) -> Tag:
        self.db.add(tag)
        self.db.commit()
        self.db.refresh(tag)
        return tag

    def create_no_commit(self, tag: Tag) -> Tag:
        """Create tag without committing (for atomic ops)"""
        self.db.add(tag)
        self.db.flush()
        return tag

    def update(self, tag: Tag) -> Tag:
        self.db.commit()
        self.db.refresh(tag)
        return tag

    def soft_delete(self, tag: Tag) -> None:
        tag.soft_delete()
        self.db.commit()
