import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import Pagination, get_post_service, get_posts_tags_service, get_tag_service
from app.core.errors import (
    INTERNAL_SERVER_ERROR,
    AlreadyExistedError,
    BlogError,
    InvalidSortError,
    PostNotFoundError,
)
from app.core.security import get_current_user, get_optional_current_user
from app.db.database import get_session
from app.models.post import Post
from app.models.user import User
from app.repositories.post import DEFAULT_SORT
from app.schemas.post import (
    PostEnvelope,
    PostListResponse,
    PostResponse,
    PostUpdateRequest,
    PostUpdateResponse,
    PostWithTagsEnvelope,
    PostWithTagsResponse,
)
from app.schemas.tag import TagResponse
from app.schemas.user import MessageResponse
from app.services.post import PostService
from app.services.posts_tags import PostsTagsService
from app.services.tag import TagService

logger = logging.getLogger(__name__)

router = APIRouter()


def _with_tags(post: Post, tag_service: TagService) -> PostWithTagsResponse:
    tags = tag_service.get_tags_of_post(post.id)
    return PostWithTagsResponse(
        **PostResponse.model_validate(post).model_dump(),
        tags=[TagResponse.model_validate(tag) for tag in tags],
    )


def _internal_error(message: str, e: Exception) -> HTTPException:
    logger.error("%s: %s", message, e, exc_info=e)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_SERVER_ERROR)


@router.get("", response_model=PostListResponse, summary="List posts")
def get_posts(
    pagination: Pagination = Depends(),
    is_draft: Optional[bool] = Query(default=None, alias="is-draft"),
    tag: Optional[str] = Query(default=None, description="only posts with this tag name"),
    sort: str = Query(default=DEFAULT_SORT, description="column, prefix with - for descending"),
    current_user: User | None = Depends(get_optional_current_user),
    post_service: PostService = Depends(get_post_service),
    tag_service: TagService = Depends(get_tag_service),
):
    """List posts; anonymous callers only see published posts"""
    if current_user is None:
        is_draft = False

    try:
        posts, count = post_service.get_posts(pagination.offset, pagination.page_size, is_draft, tag, sort)
    except InvalidSortError as e:
        logger.debug("get posts invalid sort: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PostNotFoundError as e:
        logger.debug("get posts not found: %s", e)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PostNotFoundError.message)
    except BlogError as e:
        raise _internal_error("get posts", e)

    return {
        "posts": [_with_tags(post, tag_service) for post in posts],
        "count": count,
    }


@router.get("/id/{post_id}", response_model=PostWithTagsEnvelope, summary="Get a post by id for editing")
def get_post_by_id(
    post_id: str,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
    tag_service: TagService = Depends(get_tag_service),
):
    """Get a post by id with its raw markdown content"""
    try:
        post = post_service.get_post_by_id(post_id)
    except PostNotFoundError as e:
        logger.debug("get post not found: %s", e)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PostNotFoundError.message)
    except BlogError as e:
        raise _internal_error("get post", e)
    return {"post": _with_tags(post, tag_service)}


@router.get("/{permalink}", response_model=PostWithTagsEnvelope, summary="Get a post by permalink")
def get_post(
    permalink: str,
    current_user: User | None = Depends(get_optional_current_user),
    post_service: PostService = Depends(get_post_service),
    tag_service: TagService = Depends(get_tag_service),
):
    """Get a post with its content rendered to HTML"""
    try:
        post = post_service.get_post(permalink, include_drafts=current_user is not None)
    except PostNotFoundError as e:
        logger.debug("get post not found: %s", e)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PostNotFoundError.message)
    except BlogError as e:
        raise _internal_error("get post", e)
    return {"post": _with_tags(post, tag_service)}


@router.post("", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED, summary="Create a new draft post")
def create_post(
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
    post_service: PostService = Depends(get_post_service),
):
    """Create an empty draft; its fields are filled in with PUT"""
    try:
        post = post_service.create_post()
        session.commit()
    except BlogError as e:
        raise _internal_error("store post", e)
    session.refresh(post)
    return {"post": post}


@router.put("/{post_id}", response_model=PostUpdateResponse, summary="Update a post, including its tags")
def update_post(
    post_id: str,
    body: PostUpdateRequest,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
    post_service: PostService = Depends(get_post_service),
    posts_tags_service: PostsTagsService = Depends(get_posts_tags_service),
):
    """Update a post and replace its tags with ``tags``

    The post fields and the tags are written in one transaction; if linking
    the tags fails nothing is changed and the request can be retried as is.
    """
    try:
        post = post_service.update_post(post_id, body.post)
        tags = posts_tags_service.link_post_tags(post_id, body.tags)
        session.commit()
    except PostNotFoundError as e:
        session.rollback()
        logger.debug("update post not found: %s", e)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PostNotFoundError.message)
    except AlreadyExistedError as e:
        session.rollback()
        logger.debug("update post already existed: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except BlogError as e:
        session.rollback()
        raise _internal_error("update post", e)

    session.refresh(post)
    for tag in tags:
        session.refresh(tag)
    return {"post": post, "tags": tags}


@router.delete("/{post_id}", response_model=MessageResponse, summary="Delete a post and its tag links")
def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
    post_service: PostService = Depends(get_post_service),
):
    """Delete a post"""
    try:
        post_service.delete_post(post_id)
        session.commit()
    except PostNotFoundError as e:
        session.rollback()
        logger.debug("delete post not found: %s", e)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PostNotFoundError.message)
    except BlogError as e:
        session.rollback()
        raise _internal_error("delete post", e)
    return {"message": "successfully deleted"}
