from unittest.mock import MagicMock

import pytest
from sqlalchemy import func, select

from app.core.errors import (
    PostNotFoundError,
    PostsTagsAlreadyExistedError,
    PostsTagsNotFoundError,
    StoreError,
    TagAlreadyExistedError,
    TagNotFoundError,
)
from app.models.post import Post
from app.models.posts_tags import PostsTags
from app.models.tag import Tag
from app.repositories.post import PostRepository, PostStore
from app.repositories.posts_tags import PostsTagsRepository, PostsTagsStore
from app.repositories.tag import TagRepository, TagStore
from app.services.posts_tags import PostsTagsService, unique_tag_names


@pytest.fixture
def service(session):
    return PostsTagsService(
        PostRepository(session),
        TagRepository(session),
        PostsTagsRepository(session),
    )


@pytest.fixture
def post(session):
    post = Post(title="first post", thumbnail_url="thumb", content="# hello", is_draft=True)
    session.add(post)
    session.flush()
    return post


def count_tags(session):
    return session.execute(select(func.count()).select_from(Tag)).scalar_one()


def linked_tag_names(session, post_id):
    return {tag.name for tag in TagRepository(session).find_by_post_id(post_id)}


def count_links(session, post_id):
    return session.execute(
        select(func.count()).select_from(PostsTags).where(PostsTags.post_id == post_id)
    ).scalar_one()


class TestUniqueTagNames:
    def test_keeps_first_seen_order(self):
        assert unique_tag_names(["go", "rust", "go", "python", "rust"]) == ["go", "rust", "python"]

    def test_empty(self):
        assert unique_tag_names([]) == []


class TestLinkPostTags:
    def test_creates_missing_tags(self, session, service, post):
        """go, rust, go on a post without tags"""
        tags = service.link_post_tags(post.id, ["go", "rust", "go"])

        assert [tag.name for tag in tags] == ["go", "rust"]
        assert count_tags(session) == 2
        assert count_links(session, post.id) == 2
        assert linked_tag_names(session, post.id) == {"go", "rust"}

    def test_reuses_existing_tag(self, session, service, post):
        existing = Tag(name="rust")
        session.add(existing)
        session.flush()

        tags = service.link_post_tags(post.id, ["rust"])

        assert len(tags) == 1
        assert tags[0].id == existing.id
        assert count_tags(session) == 1
        link = PostsTagsRepository(session).find_by_post_id_and_tag_name(post.id, "rust")
        assert link.tag_id == existing.id

    def test_deduplicates(self, service, post):
        tags = service.link_post_tags(post.id, ["a", "a"])
        assert len(tags) == 1
        assert tags[0].name == "a"

    def test_idempotent(self, service, post):
        first = service.link_post_tags(post.id, ["go", "rust"])
        second = service.link_post_tags(post.id, ["go", "rust"])
        assert [tag.id for tag in first] == [tag.id for tag in second]

    def test_full_replace(self, session, service, post):
        service.link_post_tags(post.id, ["x", "y"])

        tags = service.link_post_tags(post.id, ["z"])

        assert [tag.name for tag in tags] == ["z"]
        assert linked_tag_names(session, post.id) == {"z"}
        # the old tags stay around for reuse
        assert count_tags(session) == 3

    def test_empty_input_clears_links(self, session, service, post):
        service.link_post_tags(post.id, ["go"])

        tags = service.link_post_tags(post.id, [])

        assert tags == []
        assert count_links(session, post.id) == 0

    def test_unknown_post(self, session, service):
        with pytest.raises(PostNotFoundError) as exc_info:
            service.link_post_tags("nonexistent-id", ["a"])

        assert "post id=nonexistent-id" in "".join(exc_info.value.__notes__)
        assert count_tags(session) == 0
        assert session.execute(select(func.count()).select_from(PostsTags)).scalar_one() == 0

    def test_other_posts_untouched(self, session, service, post):
        other = Post(title="other", thumbnail_url="thumb", content="", is_draft=True)
        session.add(other)
        session.flush()
        service.link_post_tags(other.id, ["go"])

        service.link_post_tags(post.id, ["rust"])

        assert linked_tag_names(session, other.id) == {"go"}
        assert linked_tag_names(session, post.id) == {"rust"}


class TestLinkPostTagsFailures:
    """Failure paths, with the stores replaced by mocks"""

    @pytest.fixture
    def post_repository(self):
        return MagicMock(spec=PostStore)

    @pytest.fixture
    def tag_repository(self):
        def not_found(name):
            raise TagNotFoundError(f"find tag name={name}")

        repository = MagicMock(spec=TagStore)
        repository.find_by_name.side_effect = not_found
        return repository

    @pytest.fixture
    def posts_tags_repository(self):
        return MagicMock(spec=PostsTagsStore)

    @pytest.fixture
    def mocked_service(self, post_repository, tag_repository, posts_tags_repository):
        return PostsTagsService(post_repository, tag_repository, posts_tags_repository)

    def test_post_not_found_mutates_nothing(self, mocked_service, post_repository, tag_repository, posts_tags_repository):
        post_repository.find_by_id.side_effect = PostNotFoundError("find post id=p1")

        with pytest.raises(PostNotFoundError):
            mocked_service.link_post_tags("p1", ["go"])

        posts_tags_repository.delete_by_post_id.assert_not_called()
        tag_repository.store.assert_not_called()
        posts_tags_repository.store.assert_not_called()

    def test_lookup_error_aborts(self, mocked_service, tag_repository, posts_tags_repository):
        tag_repository.find_by_name.side_effect = StoreError("find tag name=go")

        with pytest.raises(StoreError) as exc_info:
            mocked_service.link_post_tags("p1", ["go", "rust"])

        assert "tag name=go" in "".join(exc_info.value.__notes__)
        tag_repository.store.assert_not_called()
        posts_tags_repository.store.assert_not_called()

    def test_tag_creation_error_aborts(self, mocked_service, tag_repository, posts_tags_repository):
        def store(tag):
            if tag.name == "rust":
                raise TagAlreadyExistedError(f"create tag name={tag.name}")

        tag_repository.store.side_effect = store

        with pytest.raises(TagAlreadyExistedError) as exc_info:
            mocked_service.link_post_tags("p1", ["go", "rust", "python"])

        assert "tag name=rust" in "".join(exc_info.value.__notes__)
        # go was created before rust failed; python was never reached
        stored_names = [call.args[0].name for call in tag_repository.store.call_args_list]
        assert stored_names == ["go", "rust"]
        posts_tags_repository.store.assert_not_called()

    def test_batch_insert_error(self, mocked_service, posts_tags_repository):
        posts_tags_repository.store.side_effect = PostsTagsAlreadyExistedError("create posts_tags")

        with pytest.raises(PostsTagsAlreadyExistedError) as exc_info:
            mocked_service.link_post_tags("p1", ["go"])

        assert "post id=p1" in "".join(exc_info.value.__notes__)
        posts_tags_repository.delete_by_post_id.assert_called_once_with("p1")

    def test_builds_one_link_per_unique_tag(self, mocked_service, posts_tags_repository):
        tags = mocked_service.link_post_tags("p1", ["go", "rust", "go"])

        (links,), _ = posts_tags_repository.store.call_args
        assert [link.tag_id for link in links] == [tag.id for tag in tags]
        assert all(link.post_id == "p1" for link in links)
        assert all(link.id and link.created_at for link in links)
        assert len({link.id for link in links}) == 2

    def test_store_called_with_empty_batch(self, mocked_service, posts_tags_repository):
        assert mocked_service.link_post_tags("p1", []) == []
        posts_tags_repository.delete_by_post_id.assert_called_once_with("p1")
        posts_tags_repository.store.assert_called_once_with([])


class TestDeletePostsTags:
    def test_delete(self, session, service, post):
        service.link_post_tags(post.id, ["go"])
        link = PostsTagsRepository(session).find_by_post_id_and_tag_name(post.id, "go")

        service.delete_posts_tags(link.id)

        assert count_links(session, post.id) == 0

    def test_delete_unknown(self, service):
        with pytest.raises(PostsTagsNotFoundError):
            service.delete_posts_tags("missing")
