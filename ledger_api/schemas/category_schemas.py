from pydantic import Field
from ledger_api.schemas.common_schemas import CamelModel, NameStr


class CategoryCreate(CamelModel):
    """Schema for creating a top-level category"""

    name: NameStr


class CategoryUpdate(CategoryCreate):
    """Schema for renaming a category"""

    pass


class SubcategoryCreate(CamelModel):
    """Schema for creating a category under a top-level parent"""

    name: NameStr
    parent_id: int = Field(..., gt=0)


class CategoryResponse(CamelModel):
    id: int
    name: str
    full_name: str
    parent_id: int | None
    parent_name: str | None


class CategoryTreeChild(CamelModel):
    id: int
    label: str


class CategoryTreeResponse(CamelModel):
    id: int
    label: str
    children: list[CategoryTreeChild]
