from typing import List, Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import PostsTagsAlreadyExistedError, PostsTagsNotFoundError, StoreError
from app.models.posts_tags import PostsTags
from app.models.tag import Tag


class PostsTagsStore(Protocol):
    """Post/tag association persistence."""

    def find_by_post_id_and_tag_name(self, post_id: str, tag_name: str) -> PostsTags: ...

    def store(self, posts_tags: List[PostsTags]) -> None: ...

    def delete_by_post_id(self, post_id: str) -> None: ...

    def delete(self, posts_tags_id: str) -> None: ...


class PostsTagsRepository:
    """SQLAlchemy implementation of PostsTagsStore. Never commits."""

    def __init__(self, session: Session):
        self.session = session

    def find_by_post_id_and_tag_name(self, post_id: str, tag_name: str) -> PostsTags:
        query = (
            select(PostsTags)
            .join(Tag, Tag.id == PostsTags.tag_id)
            .where(PostsTags.post_id == post_id, Tag.name == tag_name)
        )
        try:
            posts_tags = self.session.execute(query).scalars().first()
        except SQLAlchemyError as e:
            raise StoreError(f"find posts_tags post id={post_id} tag name={tag_name}") from e
        if posts_tags is None:
            raise PostsTagsNotFoundError(f"find posts_tags post id={post_id} tag name={tag_name}")
        return posts_tags

    def store(self, posts_tags: List[PostsTags]) -> None:
        """Insert all associations in one flush; either all are written or none."""
        if not posts_tags:
            return
        self.session.add_all(posts_tags)
        try:
            self.session.flush()
        except IntegrityError as e:
            raise PostsTagsAlreadyExistedError("create posts_tags") from e
        except SQLAlchemyError as e:
            raise StoreError("create posts_tags") from e

    def delete_by_post_id(self, post_id: str) -> None:
        try:
            self.session.execute(delete(PostsTags).where(PostsTags.post_id == post_id))
        except SQLAlchemyError as e:
            raise StoreError(f"delete posts_tags post id={post_id}") from e

    def delete(self, posts_tags_id: str) -> None:
        try:
            result = self.session.execute(delete(PostsTags).where(PostsTags.id == posts_tags_id))
        except SQLAlchemyError as e:
            raise StoreError(f"delete posts_tags id={posts_tags_id}") from e
        if result.rowcount == 0:
            raise PostsTagsNotFoundError(f"delete posts_tags id={posts_tags_id}")
