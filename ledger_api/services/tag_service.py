import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ledger_api.models.tag import Tag, normalize_tag_name
from ledger_api.models.user import User
from ledger_api.repositories.tag_repository import TagRepository
from ledger_api.schemas.tag_schemas import TagCreate, TagUpdate
from ledger_api.core.exceptions import AlreadyExistsException, NotFoundException

logger = logging.getLogger(__name__)

ENTITY = "Tag"


class TagService:
    """Service for tag business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TagRepository(db)

    def get_tags(self, user: User) -> list[Tag]:
        """Get tags ordered by usage, most used first"""
        return self.repo.get_by_user(user.id)

    def get_tag(self, tag_id: int, user: User) -> Tag:
        tag = self.repo.get_by_id_and_user(tag_id, user.id)
        if not tag:
            raise NotFoundException(ENTITY, tag_id)
        return tag

    def create_tag(self, data: TagCreate, user: User) -> Tag:
        tag = Tag(user_id=user.id, name=normalize_tag_name(data.name), usage_count=0)
        try:
            return self.repo.create(tag)
        except IntegrityError:
            self.db.rollback()
            raise AlreadyExistsException(ENTITY, tag.name)

    def update_tag(self, tag_id: int, data: TagUpdate, user: User) -> Tag:
        tag = self.get_tag(tag_id, user)
        tag.name = normalize_tag_name(data.name)
        try:
            return self.repo.update(tag)
        except IntegrityError:
            self.db.rollback()
            raise AlreadyExistsException(ENTITY, normalize_tag_name(data.name))

    def delete_tag(self, tag_id: int, user: User) -> None:
        tag = self.get_tag(tag_id, user)
        self.repo.soft_delete(tag)

    def find_or_create_many(self, user_id: int, names: list[str]) -> list[Tag]:
        """
        Resolve tag names to live tags, creating missing ones.

        Names are trimmed and lowercased; blanks are dropped and duplicates
        collapse onto their first occurrence. Nothing is committed, so new
        tags roll back with the caller's unit of work.

        Args:
            user_id: Owner of the tags
            names: Raw tag names as entered by the client

        Returns:
            Tags in first-seen order
        """
        unique_names = list(dict.fromkeys(n for n in map(normalize_tag_name, names) if n))
        tags = []

        for name in unique_names:
            tag = self.repo.get_by_name(name, user_id)
            if tag is None:
                tag = self.repo.create_no_commit(Tag(user_id=user_id, name=name, usage_count=0))
                logger.debug("Created tag %r for user %s", name, user_id)
            tags.append(tag)

        return tags
