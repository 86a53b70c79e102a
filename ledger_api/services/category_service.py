import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ledger_api.models.category import Category, build_full_name
from ledger_api.models.user import User
from ledger_api.repositories.category_repository import CategoryRepository
from ledger_api.repositories.transaction_repository import TransactionRepository
from ledger_api.schemas.category_schemas import (
    CategoryCreate,
    CategoryUpdate,
    SubcategoryCreate,
    CategoryResponse,
    CategoryTreeChild,
    CategoryTreeResponse,
)
from ledger_api.core.exceptions import (
    AlreadyExistsException,
    InvalidOperationException,
    NotFoundException,
)
from ledger_api.services.transaction_service import refresh_split_totals

logger = logging.getLogger(__name__)

ENTITY = "Category"


def to_category_response(category: Category) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,
        name=category.name,
        full_name=category.full_name,
        parent_id=category.parent_id,
        parent_name=category.parent.name if category.parent else None,
    )


class CategoryService:
    """Service for the two-level category tree"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CategoryRepository(db)
        self.transaction_repo = TransactionRepository(db)

    def get_categories(self, user: User) -> list[CategoryResponse]:
        """Get every live category, ordered by name, with its parent's name"""
        return [to_category_response(c) for c in self.repo.get_by_user(user.id)]

    def get_categories_tree(self, user: User) -> list[CategoryTreeResponse]:
        """
        Group categories under their top-level parents.

        Subcategories whose parent is not live are left out.
        """
        categories = self.repo.get_by_user(user.id)

        tree: dict[int, CategoryTreeResponse] = {}
        for category in categories:
            if category.is_top_level:
                tree[category.id] = CategoryTreeResponse(
                    id=category.id, label=category.name, children=[]
                )

        for category in categories:
            if not category.is_top_level and category.parent_id in tree:
                tree[category.parent_id].children.append(
                    CategoryTreeChild(id=category.id, label=category.name)
                )

        return list(tree.values())

    def get_category_entity(self, category_id: int, user: User) -> Category:
        category = self.repo.get_by_id_and_user(category_id, user.id)
        if not category:
            raise NotFoundException(ENTITY, category_id)
        return category

    def get_category(self, category_id: int, user: User) -> CategoryResponse:
        return to_category_response(self.get_category_entity(category_id, user))

    def create_category(self, data: CategoryCreate, user: User) -> CategoryResponse:
        """Create a top-level category"""
        category = Category(
            user_id=user.id,
            name=data.name,
            parent_id=None,
            full_name=build_full_name(data.name),
        )
        try:
            return to_category_response(self.repo.create(category))
        except IntegrityError:
            self.db.rollback()
            raise AlreadyExistsException(ENTITY, category.full_name)

    def create_subcategory(self, data: SubcategoryCreate, user: User) -> CategoryResponse:
        """
        Create a category under a top-level parent.

        Raises:
            NotFoundException: If the parent doesn't exist for the user
            InvalidOperationException: If the parent is itself a subcategory
            AlreadyExistsException: If the full name is already taken
        """
        parent = self.repo.get_by_id_and_user(data.parent_id, user.id)
        if not parent:
            raise NotFoundException(ENTITY, data.parent_id)
        if not parent.is_top_level:
            raise InvalidOperationException("Cannot create subcategory of a subcategory")

        category = Category(
            user_id=user.id,
            name=data.name,
            parent_id=parent.id,
            full_name=build_full_name(data.name, parent.name),
        )
        try:
            return to_category_response(self.repo.create(category))
        except IntegrityError:
            self.db.rollback()
            raise AlreadyExistsException(ENTITY, category.full_name)

    def update_category(
        self, category_id: int, data: CategoryUpdate, user: User
    ) -> CategoryResponse:
        """
        Rename a category and propagate the new path.

        Updates, in one commit:
        - the category's own full_name
        - each direct child's full_name, one child at a time, soft-deleted
          children included
        - category_full_name on every split referencing any of them
        - category_name on every transaction owning such a split

        Raises:
            NotFoundException: If category not found
            AlreadyExistsException: If the new path collides with a live category
        """
        category = self.get_category_entity(category_id, user)
        full_name = build_full_name(data.name, category.parent.name if category.parent else None)

        try:
            category.name = data.name
            category.full_name = full_name
            self.repo.save_no_commit(category)

            renamed = [category]
            if category.is_top_level:
                for child in self.repo.get_children(
                    category.id, user.id, include_deleted=True
                ):
                    child.full_name = build_full_name(child.name, category.name)
                    self.repo.save_no_commit(child)
                    renamed.append(child)

            split_count = 0
            for renamed_category in renamed:
                split_count += self.transaction_repo.update_split_category_full_name(
                    renamed_category.id, renamed_category.full_name
                )

            transactions = self.transaction_repo.get_by_category_ids(c.id for c in renamed)
            for transaction in transactions:
                refresh_split_totals(transaction)

            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise AlreadyExistsException(ENTITY, full_name)
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Category %s renamed: %s categories, %s splits, %s transactions updated",
            category.id,
            len(renamed),
            split_count,
            len(transactions),
        )
        self.db.refresh(category)
        return to_category_response(category)

    def delete_category(self, category_id: int, user: User) -> None:
        """Soft delete a category and, for a top-level one, its live children"""
        category = self.get_category_entity(category_id, user)

        doomed = [category]
        if category.is_top_level:
            doomed.extend(self.repo.get_children(category.id, user.id))

        self.repo.soft_delete_many(doomed)
        self.db.commit()
        logger.info("Deleted category %s and %s children", category.id, len(doomed) - 1)
