"""
Tag linking for posts.

``PostsTagsService.link_post_tags`` makes the tag associations of a post match
a list of tag names exactly:

1. the post must exist, otherwise ``PostNotFoundError`` and nothing changes;
2. every existing association of the post is deleted;
3. names are deduplicated, keeping first-seen order;
4. each name is resolved to an existing tag or a newly stored one;
5. one association per resolved tag is inserted in a single batch.

Stores only flush, so all of this runs inside the caller's transaction. If
any step fails the caller rolls back and the post keeps its previous tags.
Within the transaction, a failure after step 2 leaves the post with no
associations; the operation converges, so the caller retries it as a whole.
"""

import logging
from typing import Iterable, List

from app.core.errors import BlogError, TagNotFoundError
from app.models.common import generate_id, utcnow
from app.models.posts_tags import PostsTags
from app.models.tag import Tag
from app.repositories.post import PostStore
from app.repositories.posts_tags import PostsTagsStore
from app.repositories.tag import TagStore

logger = logging.getLogger(__name__)


def unique_tag_names(tag_names: Iterable[str]) -> List[str]:
    """Drop duplicate names, keeping the first occurrence of each"""
    return list(dict.fromkeys(tag_names))


class PostsTagsService:
    def __init__(
        self,
        post_repository: PostStore,
        tag_repository: TagStore,
        posts_tags_repository: PostsTagsStore,
    ):
        self.post_repository = post_repository
        self.tag_repository = tag_repository
        self.posts_tags_repository = posts_tags_repository

    def link_post_tags(self, post_id: str, tag_names: Iterable[str]) -> List[Tag]:
        """Replace the tags of a post with ``tag_names``.

        Args:
            post_id: ID of an existing post
            tag_names: tag names, in any order, duplicates allowed

        Returns:
            The resolved tags, one per unique name, in first-seen order

        Raises:
            PostNotFoundError: the post does not exist
            TagAlreadyExistedError: a new tag collided with a concurrent writer
            PostsTagsAlreadyExistedError: the association batch collided
            StoreError: any other store failure
        """
        # existence check only, the post itself is not used
        try:
            self.post_repository.find_by_id(post_id)
        except BlogError as e:
            e.add_note(f"link post tags: get post id={post_id}")
            raise

        try:
            self.posts_tags_repository.delete_by_post_id(post_id)
        except BlogError as e:
            e.add_note(f"link post tags: delete posts_tags post id={post_id}")
            raise

        tags: List[Tag] = []
        posts_tags: List[PostsTags] = []
        for tag_name in unique_tag_names(tag_names):
            try:
                tag = self._resolve_tag(tag_name)
            except BlogError as e:
                e.add_note(f"link post tags: post id={post_id} tag name={tag_name}")
                logger.debug("link post tags aborted at tag %r: %s", tag_name, e)
                raise
            tags.append(tag)
            posts_tags.append(self._new_posts_tags(post_id, tag.id))

        try:
            self.posts_tags_repository.store(posts_tags)
        except BlogError as e:
            e.add_note(f"link post tags: store posts_tags post id={post_id} tag names={[t.name for t in tags]}")
            logger.debug("link post tags aborted storing associations of post %s: %s", post_id, e)
            raise

        logger.info("linked post %s to %d tag(s)", post_id, len(tags))
        return tags

    def delete_posts_tags(self, posts_tags_id: str) -> None:
        try:
            self.posts_tags_repository.delete(posts_tags_id)
        except BlogError as e:
            e.add_note("delete posts_tags")
            raise

    def _resolve_tag(self, tag_name: str) -> Tag:
        """Find the tag named ``tag_name`` or store a new one"""
        try:
            return self.tag_repository.find_by_name(tag_name)
        except TagNotFoundError:
            pass

        now = utcnow()
        tag = Tag(id=generate_id(), name=tag_name, created_at=now, updated_at=now)
        self.tag_repository.store(tag)
        logger.debug("created tag %r (%s)", tag_name, tag.id)
        return tag

    @staticmethod
    def _new_posts_tags(post_id: str, tag_id: str) -> PostsTags:
        now = utcnow()
        return PostsTags(id=generate_id(), post_id=post_id, tag_id=tag_id, created_at=now, updated_at=now)
