import pytest

from app.core.errors import (
    InvalidSortError,
    PermalinkAlreadyExistedError,
    PostNotFoundError,
    PostsTagsAlreadyExistedError,
    PostsTagsNotFoundError,
    TagAlreadyExistedError,
    TagNotFoundError,
)
from app.models.post import Post
from app.models.posts_tags import PostsTags
from app.models.tag import Tag
from app.repositories.post import PostRepository, parse_sort
from app.repositories.posts_tags import PostsTagsRepository
from app.repositories.tag import TagRepository


def new_post(session, title, permalink=None, is_draft=False):
    post = Post(title=title, thumbnail_url="thumb", content="", permalink=permalink, is_draft=is_draft)
    PostRepository(session).create(post)
    return post


def new_tag(session, name):
    tag = Tag(name=name)
    TagRepository(session).store(tag)
    return tag


def link(session, post, *tags):
    PostsTagsRepository(session).store([PostsTags(post_id=post.id, tag_id=tag.id) for tag in tags])


class TestParseSort:
    def test_ascending(self):
        assert str(parse_sort("title")) == str(Post.title.asc())

    def test_descending(self):
        assert str(parse_sort("-published_at")) == str(Post.published_at.desc())

    @pytest.mark.parametrize("sort", ["", "-", "password", "content", "title;drop table posts"])
    def test_invalid(self, sort):
        with pytest.raises(InvalidSortError):
            parse_sort(sort)


class TestPostRepository:
    def test_find_by_permalink(self, session):
        post = new_post(session, "hello", permalink="hello")
        assert PostRepository(session).find_by_permalink("hello").id == post.id

    def test_find_missing(self, session):
        with pytest.raises(PostNotFoundError):
            PostRepository(session).find_by_id("missing")
        with pytest.raises(PostNotFoundError):
            PostRepository(session).find_by_permalink("missing")

    def test_duplicate_permalink(self, session):
        new_post(session, "first", permalink="same")
        with pytest.raises(PermalinkAlreadyExistedError):
            new_post(session, "second", permalink="same")

    def test_many_posts_without_permalink(self, session):
        new_post(session, "first")
        new_post(session, "second")
        assert PostRepository(session).count() == 2

    def test_find_all_filters(self, session):
        repository = PostRepository(session)
        go = new_tag(session, "go")
        published = new_post(session, "published")
        draft = new_post(session, "draft", is_draft=True)
        link(session, published, go)
        link(session, draft, go)

        assert [p.title for p in repository.find_all(0, None, is_draft=False)] == ["published"]
        assert [p.title for p in repository.find_all(0, None, is_draft=True)] == ["draft"]
        assert repository.count(tag_name="go") == 2
        assert repository.count(is_draft=False, tag_name="go") == 1
        with pytest.raises(PostNotFoundError):
            repository.find_all(0, None, tag_name="rust")
        assert repository.count(tag_name="rust") == 0

    def test_find_all_pages(self, session):
        repository = PostRepository(session)
        for title in ["c", "a", "b"]:
            new_post(session, title)

        assert [p.title for p in repository.find_all(0, 2, sort="title")] == ["a", "b"]
        assert [p.title for p in repository.find_all(2, 2, sort="title")] == ["c"]
        assert [p.title for p in repository.find_all(0, None, sort="-title")] == ["c", "b", "a"]

    def test_delete_removes_links(self, session):
        post = new_post(session, "hello")
        tag = new_tag(session, "go")
        link(session, post, tag)

        PostRepository(session).delete(post.id)

        assert TagRepository(session).find_by_post_id(post.id) == []
        assert TagRepository(session).find_by_id(tag.id).name == "go"

    def test_delete_missing(self, session):
        with pytest.raises(PostNotFoundError):
            PostRepository(session).delete("missing")


class TestTagRepository:
    def test_duplicate_name(self, session):
        new_tag(session, "go")
        with pytest.raises(TagAlreadyExistedError):
            new_tag(session, "go")

    def test_find_by_name(self, session):
        tag = new_tag(session, "go")
        assert TagRepository(session).find_by_name("go").id == tag.id
        with pytest.raises(TagNotFoundError):
            TagRepository(session).find_by_name("Go")

    def test_name_filter_is_literal(self, session):
        new_tag(session, "100%")
        new_tag(session, "1000")
        repository = TagRepository(session)
        assert [t.name for t in repository.find_all(0, None, "0%")] == ["100%"]
        assert repository.count("0%") == 1

    def test_find_by_post_id(self, session):
        post = new_post(session, "hello")
        other = new_post(session, "other")
        go, rust, python = new_tag(session, "go"), new_tag(session, "rust"), new_tag(session, "python")
        link(session, post, go, rust)
        link(session, other, python)

        assert {t.name for t in TagRepository(session).find_by_post_id(post.id)} == {"go", "rust"}
        assert TagRepository(session).find_by_post_id("missing") == []

    def test_delete_missing(self, session):
        with pytest.raises(TagNotFoundError):
            TagRepository(session).delete("missing")


class TestPostsTagsRepository:
    def test_store_empty_batch(self, session):
        PostsTagsRepository(session).store([])

    def test_duplicate_pair(self, session):
        post = new_post(session, "hello")
        tag = new_tag(session, "go")
        link(session, post, tag)
        with pytest.raises(PostsTagsAlreadyExistedError):
            link(session, post, tag)

    def test_delete_by_post_id(self, session):
        post = new_post(session, "hello")
        other = new_post(session, "other")
        tag = new_tag(session, "go")
        link(session, post, tag)
        link(session, other, tag)
        repository = PostsTagsRepository(session)

        repository.delete_by_post_id(post.id)

        with pytest.raises(PostsTagsNotFoundError):
            repository.find_by_post_id_and_tag_name(post.id, "go")
        assert repository.find_by_post_id_and_tag_name(other.id, "go").post_id == other.id

    def test_delete_by_post_id_without_links(self, session):
        PostsTagsRepository(session).delete_by_post_id("missing")

    def test_delete_missing(self, session):
        with pytest.raises(PostsTagsNotFoundError):
            PostsTagsRepository(session).delete("missing")
