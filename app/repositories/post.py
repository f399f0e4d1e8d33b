from typing import List, Optional, Protocol

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import InvalidSortError, PermalinkAlreadyExistedError, PostNotFoundError, StoreError
from app.models.post import Post
from app.models.posts_tags import PostsTags
from app.models.tag import Tag

SORTABLE_COLUMNS = {
    "created_at": Post.created_at,
    "updated_at": Post.updated_at,
    "published_at": Post.published_at,
    "title": Post.title,
}
DEFAULT_SORT = "-created_at"


class PostStore(Protocol):
    """Post persistence used by the services."""

    def find_by_id(self, post_id: str) -> Post: ...

    def find_by_permalink(self, permalink: str) -> Post: ...

    def find_all(
        self,
        offset: int,
        page_size: Optional[int],
        is_draft: Optional[bool] = None,
        tag_name: Optional[str] = None,
        sort: str = DEFAULT_SORT,
    ) -> List[Post]: ...

    def count(self, is_draft: Optional[bool] = None, tag_name: Optional[str] = None) -> int: ...

    def create(self, post: Post) -> None: ...

    def update(self, post: Post) -> None: ...

    def delete(self, post_id: str) -> None: ...


def parse_sort(sort: str):
    """Turn ``"-published_at"`` into an ORDER BY clause"""
    descending = sort.startswith("-")
    column = SORTABLE_COLUMNS.get(sort.lstrip("-"))
    if column is None:
        raise InvalidSortError(f"sort={sort}")
    return column.desc() if descending else column.asc()


class PostRepository:
    """SQLAlchemy implementation of PostStore. Never commits."""

    def __init__(self, session: Session):
        self.session = session

    def _filtered(self, query, is_draft: Optional[bool], tag_name: Optional[str]):
        if is_draft is not None:
            query = query.where(Post.is_draft == is_draft)
        if tag_name:
            tagged = (
                select(PostsTags.post_id)
                .join(Tag, Tag.id == PostsTags.tag_id)
                .where(Tag.name == tag_name)
            )
            query = query.where(Post.id.in_(tagged))
        return query

    def find_by_id(self, post_id: str) -> Post:
        try:
            post = self.session.get(Post, post_id)
        except SQLAlchemyError as e:
            raise StoreError(f"find post id={post_id}") from e
        if post is None:
            raise PostNotFoundError(f"find post id={post_id}")
        return post

    def find_by_permalink(self, permalink: str) -> Post:
        try:
            post = self.session.execute(
                select(Post).where(Post.permalink == permalink)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreError(f"find post permalink={permalink}") from e
        if post is None:
            raise PostNotFoundError(f"find post permalink={permalink}")
        return post

    def find_all(
        self,
        offset: int,
        page_size: Optional[int],
        is_draft: Optional[bool] = None,
        tag_name: Optional[str] = None,
        sort: str = DEFAULT_SORT,
    ) -> List[Post]:
        query = self._filtered(select(Post), is_draft, tag_name)
        query = query.order_by(parse_sort(sort), Post.id).offset(offset)
        if page_size:
            query = query.limit(page_size)
        try:
            posts = list(self.session.execute(query).scalars())
        except SQLAlchemyError as e:
            raise StoreError("find all posts") from e
        if not posts:
            raise PostNotFoundError("find all posts")
        return posts

    def count(self, is_draft: Optional[bool] = None, tag_name: Optional[str] = None) -> int:
        query = self._filtered(select(func.count()).select_from(Post), is_draft, tag_name)
        try:
            return self.session.execute(query).scalar_one()
        except SQLAlchemyError as e:
            raise StoreError("count posts") from e

    def create(self, post: Post) -> None:
        self.session.add(post)
        try:
            self.session.flush()
        except IntegrityError as e:
            raise PermalinkAlreadyExistedError(f"create post permalink={post.permalink}") from e
        except SQLAlchemyError as e:
            raise StoreError("create post") from e

    def update(self, post: Post) -> None:
        try:
            self.session.flush()
        except IntegrityError as e:
            raise PermalinkAlreadyExistedError(f"update post permalink={post.permalink}") from e
        except SQLAlchemyError as e:
            raise StoreError(f"update post id={post.id}") from e

    def delete(self, post_id: str) -> None:
        try:
            self.session.execute(delete(PostsTags).where(PostsTags.post_id == post_id))
            result = self.session.execute(delete(Post).where(Post.id == post_id))
        except SQLAlchemyError as e:
            raise StoreError(f"delete post id={post_id}") from e
        if result.rowcount == 0:
            raise PostNotFoundError(f"delete post id={post_id}")
