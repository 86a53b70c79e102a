from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ledger_api.database import get_db
from ledger_api.dependencies import get_current_user
from ledger_api.models.user import User
from ledger_api.services.category_service import CategoryService
from ledger_api.schemas.category_schemas import (
    CategoryCreate,
    CategoryUpdate,
    SubcategoryCreate,
    CategoryResponse,
    CategoryTreeResponse,
)

router = APIRouter()


@router.get("", response_model=list[CategoryResponse])
def list_categories(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get all categories ordered by name"""
    return CategoryService(db).get_categories(user)


# Declared before /{category_id} so "tree" is not parsed as an id
@router.get("/tree", response_model=list[CategoryTreeResponse])
def get_category_tree(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get top-level categories with their subcategories"""
    return CategoryService(db).get_categories_tree(user)


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    return CategoryService(db).get_category(category_id, user)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    data: CategoryCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Create a top-level category"""
    return CategoryService(db).create_category(data, user)


@router.post(
    "/subcategory", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED
)
def create_subcategory(
    data: SubcategoryCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Create a category under a top-level parent"""
    return CategoryService(db).create_subcategory(data, user)


@router.patch("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    data: CategoryUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Rename a category; subcategories and transaction splits follow"""
    return CategoryService(db).update_category(category_id, data, user)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Delete a category and, for a top-level one, its subcategories"""
    CategoryService(db).delete_category(category_id, user)
    return None
