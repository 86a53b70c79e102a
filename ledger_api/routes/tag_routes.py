from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ledger_api.database import get_db
from ledger_api.dependencies import get_current_user
from ledger_api.models.user import User
from ledger_api.services.tag_service import TagService
from ledger_api.schemas.tag_schemas import TagCreate, TagUpdate, TagResponse

router = APIRouter()


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(data: TagCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Create a tag; names are stored trimmed and lowercased"""
    return TagService(db).create_tag(data, user)


@router.get("", response_model=list[TagResponse])
def list_tags(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get all tags, most used first"""
    return TagService(db).get_tags(user)


@router.get("/{tag_id}", response_model=TagResponse)
def get_tag(tag_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return TagService(db).get_tag(tag_id, user)


@router.patch("/{tag_id}", response_model=TagResponse)
def update_tag(
    tag_id: int,
    data: TagUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return TagService(db).update_tag(tag_id, data, user)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tag(tag_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    TagService(db).delete_tag(tag_id, user)
    return None
