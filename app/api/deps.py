"""Per-request wiring of repositories and services."""

from typing import Optional

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.db.database import get_session
from app.repositories.post import PostRepository
from app.repositories.posts_tags import PostsTagsRepository
from app.repositories.tag import TagRepository
from app.repositories.user import UserRepository
from app.services.image import ImageService
from app.services.post import PostService
from app.services.posts_tags import PostsTagsService
from app.services.tag import TagService
from app.services.user import UserService


def get_post_service(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> PostService:
    return PostService(PostRepository(session), settings.default_thumbnail_url)


def get_tag_service(session: Session = Depends(get_session)) -> TagService:
    return TagService(TagRepository(session))


def get_posts_tags_service(session: Session = Depends(get_session)) -> PostsTagsService:
    return PostsTagsService(
        PostRepository(session),
        TagRepository(session),
        PostsTagsRepository(session),
    )


def get_user_service(session: Session = Depends(get_session)) -> UserService:
    return UserService(UserRepository(session))


def get_image_service(settings: Settings = Depends(get_settings)) -> ImageService:
    return ImageService(settings)


class Pagination:
    """``page``/``page-size`` query parameters as offset and limit

    Pagination applies only when both are given; page 0 counts as page 1.
    """

    def __init__(
        self,
        page: Optional[int] = Query(default=None, ge=0),
        page_size: Optional[int] = Query(default=None, alias="page-size", ge=1),
    ):
        self.offset = 0
        self.page_size = None
        if page is not None and page_size is not None:
            self.offset = (max(page, 1) - 1) * page_size
            self.page_size = page_size
