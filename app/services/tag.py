import logging
from typing import List, Optional, Tuple

from app.core.errors import BlogError, TagNameAlreadyExistedError, TagNotFoundError
from app.models.common import generate_id
from app.models.tag import Tag
from app.repositories.tag import TagStore

logger = logging.getLogger(__name__)


class TagService:
    """Tag use cases"""

    def __init__(self, tag_repository: TagStore):
        self.tag_repository = tag_repository

    def store_tag(self, name: str) -> Tag:
        try:
            self.tag_repository.find_by_name(name)
        except TagNotFoundError:
            pass
        else:
            raise TagNameAlreadyExistedError(f"store tag name={name}")

        tag = Tag(id=generate_id(), name=name)
        self.tag_repository.store(tag)
        logger.info("created tag %r (%s)", name, tag.id)
        return tag

    def get_tags(
        self,
        offset: int = 0,
        page_size: Optional[int] = None,
        name: Optional[str] = None,
    ) -> Tuple[List[Tag], int]:
        try:
            tags = self.tag_repository.find_all(offset, page_size, name)
            count = self.tag_repository.count(name)
        except BlogError as e:
            e.add_note("get tags")
            raise
        return tags, count

    def get_tag(self, tag_id: str) -> Tag:
        return self.tag_repository.find_by_id(tag_id)

    def get_tags_of_post(self, post_id: str) -> List[Tag]:
        return self.tag_repository.find_by_post_id(post_id)

    def delete_tag(self, tag_id: str) -> None:
        self.tag_repository.delete(tag_id)
        logger.info("deleted tag %s", tag_id)
