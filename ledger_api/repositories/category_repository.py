from sqlalchemy.orm import Session, joinedload
from ledger_api.models.base import utcnow
from ledger_api.models.category import Category


class CategoryRepository:
    """Repository for Category operations scoped to a user"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: int) -> list[Category]:
        """Get all live categories, parents and children alike, ordered by name"""
        return (
            self.db.query(Category)
            .options(joinedload(Category.parent))
            .filter(Category.user_id == user_id, Category.deleted_at.is_(None))
            .order_by(Category.name.asc())
            .all()
        )

    def get_by_id_and_user(self, category_id: int, user_id: int) -> Category | None:
        return (
            self.db.query(Category)
            .options(joinedload(Category.parent))
            .filter(
                Category.id == category_id,
                Category.user_id == user_id,
                Category.deleted_at.is_(None),
            )
            .first()
        )

    def get_children(
        self, parent_id: int, user_id: int, include_deleted: bool = False
    ) -> list[Category]:
        """Get subcategories of a top-level category, live ones only by default"""
        query = self.db.query(Category).filter(
            Category.parent_id == parent_id,
            Category.user_id == user_id,
        )
        if not include_deleted:
            query = query.filter(Category.deleted_at.is_(None))
        return query.order_by(Category.id.asc()).all()

    def create(self, category: Category) -> Category:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def save_no_commit(self, category: Category) -> Category:
        """Flush a single category change. Caller responsible for commit."""
        self.db.add(category)
        self.db.flush()
        return category

    def soft_delete_many(self, categories: list[Category]) -> None:
        """Mark categories deleted without committing"""
        deleted_at = utcnow()
        for category in categories:
            category.deleted_at = deleted_at
        self.db.flush()
