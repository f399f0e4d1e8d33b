import logging
from typing import List, Optional, Tuple

from app.core.errors import BlogError, PermalinkAlreadyExistedError, PostNotFoundError
from app.models.common import generate_id, utcnow
from app.models.post import Post
from app.repositories.post import DEFAULT_SORT, PostStore, parse_sort
from app.schemas.post import PostUpdate
from app.services.markdown import render_markdown

logger = logging.getLogger(__name__)


class PostService:
    """Post use cases"""

    def __init__(self, post_repository: PostStore, default_thumbnail_url: str):
        self.post_repository = post_repository
        self.default_thumbnail_url = default_thumbnail_url

    def create_post(self) -> Post:
        """Create an empty draft"""
        post = Post(
            id=generate_id(),
            title="",
            thumbnail_url=self.default_thumbnail_url,
            content="",
            permalink=None,
            is_draft=True,
        )
        self.post_repository.create(post)
        logger.info("created draft post %s", post.id)
        return post

    def update_post(self, post_id: str, post_update: PostUpdate) -> Post:
        post = self.post_repository.find_by_id(post_id)

        permalink = post_update.permalink or None
        if permalink is not None and permalink != post.permalink:
            try:
                other = self.post_repository.find_by_permalink(permalink)
            except PostNotFoundError:
                other = None
            if other is not None and other.id != post.id:
                raise PermalinkAlreadyExistedError(f"update post permalink={permalink}")

        post.title = post_update.title
        post.thumbnail_url = post_update.thumbnail_url or self.default_thumbnail_url
        post.content = post_update.content
        post.permalink = permalink
        # published_at is set on the first publish only
        if not post_update.is_draft and post.published_at is None:
            post.published_at = utcnow()
        post.is_draft = post_update.is_draft
        post.updated_at = utcnow()

        self.post_repository.update(post)
        return post

    def get_posts(
        self,
        offset: int = 0,
        page_size: Optional[int] = None,
        is_draft: Optional[bool] = None,
        tag_name: Optional[str] = None,
        sort: str = DEFAULT_SORT,
    ) -> Tuple[List[Post], int]:
        parse_sort(sort)  # reject bad sort conditions before querying
        try:
            posts = self.post_repository.find_all(offset, page_size, is_draft, tag_name, sort)
            count = self.post_repository.count(is_draft, tag_name)
        except BlogError as e:
            e.add_note("get posts")
            raise
        return posts, count

    def get_post(self, permalink: str, include_drafts: bool = False) -> Post:
        """Get a post by permalink with its content rendered to HTML

        The returned object is detached from the rendering: the stored
        markdown is not modified.
        """
        post = self.post_repository.find_by_permalink(permalink)
        if post.is_draft and not include_drafts:
            raise PostNotFoundError(f"get post permalink={permalink}")
        return Post(
            id=post.id,
            title=post.title,
            thumbnail_url=post.thumbnail_url,
            content=render_markdown(post.content),
            permalink=post.permalink,
            is_draft=post.is_draft,
            created_at=post.created_at,
            updated_at=post.updated_at,
            published_at=post.published_at,
        )

    def get_post_by_id(self, post_id: str) -> Post:
        return self.post_repository.find_by_id(post_id)

    def delete_post(self, post_id: str) -> None:
        self.post_repository.delete(post_id)
        logger.info("deleted post %s", post_id)
