from typing import List, Optional, Protocol

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StoreError, TagAlreadyExistedError, TagNotFoundError
from app.models.posts_tags import PostsTags
from app.models.tag import Tag


class TagStore(Protocol):
    """Tag persistence used by the services."""

    def find_by_id(self, tag_id: str) -> Tag: ...

    def find_by_name(self, name: str) -> Tag: ...

    def find_all(self, offset: int, page_size: Optional[int], name: Optional[str] = None) -> List[Tag]: ...

    def find_by_post_id(self, post_id: str) -> List[Tag]: ...

    def count(self, name: Optional[str] = None) -> int: ...

    def store(self, tag: Tag) -> None: ...

    def delete(self, tag_id: str) -> None: ...


class TagRepository:
    """SQLAlchemy implementation of TagStore. Never commits."""

    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, tag_id: str) -> Tag:
        try:
            tag = self.session.get(Tag, tag_id)
        except SQLAlchemyError as e:
            raise StoreError(f"find tag id={tag_id}") from e
        if tag is None:
            raise TagNotFoundError(f"find tag id={tag_id}")
        return tag

    def find_by_name(self, name: str) -> Tag:
        try:
            tag = self.session.execute(
                select(Tag).where(Tag.name == name)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreError(f"find tag name={name}") from e
        if tag is None:
            raise TagNotFoundError(f"find tag name={name}")
        return tag

    def find_all(self, offset: int, page_size: Optional[int], name: Optional[str] = None) -> List[Tag]:
        query = select(Tag).order_by(Tag.name).offset(offset)
        if name:
            query = query.where(Tag.name.contains(name, autoescape=True))
        if page_size:
            query = query.limit(page_size)
        try:
            tags = list(self.session.execute(query).scalars())
        except SQLAlchemyError as e:
            raise StoreError("find all tags") from e
        if not tags:
            raise TagNotFoundError("find all tags")
        return tags

    def find_by_post_id(self, post_id: str) -> List[Tag]:
        query = (
            select(Tag)
            .join(PostsTags, PostsTags.tag_id == Tag.id)
            .where(PostsTags.post_id == post_id)
            .order_by(PostsTags.created_at, PostsTags.id)
        )
        try:
            return list(self.session.execute(query).scalars())
        except SQLAlchemyError as e:
            raise StoreError(f"find tags post id={post_id}") from e

    def count(self, name: Optional[str] = None) -> int:
        query = select(func.count()).select_from(Tag)
        if name:
            query = query.where(Tag.name.contains(name, autoescape=True))
        try:
            return self.session.execute(query).scalar_one()
        except SQLAlchemyError as e:
            raise StoreError("count tags") from e

    def store(self, tag: Tag) -> None:
        self.session.add(tag)
        try:
            self.session.flush()
        except IntegrityError as e:
            raise TagAlreadyExistedError(f"create tag name={tag.name}") from e
        except SQLAlchemyError as e:
            raise StoreError(f"create tag name={tag.name}") from e

    def delete(self, tag_id: str) -> None:
        try:
            # First delete all post-tag relationships
            self.session.execute(delete(PostsTags).where(PostsTags.tag_id == tag_id))
            result = self.session.execute(delete(Tag).where(Tag.id == tag_id))
        except SQLAlchemyError as e:
            raise StoreError(f"delete tag id={tag_id}") from e
        if result.rowcount == 0:
            raise TagNotFoundError(f"delete tag id={tag_id}")
