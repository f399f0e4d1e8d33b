import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import Pagination, get_tag_service
from app.core.errors import (
    INTERNAL_SERVER_ERROR,
    AlreadyExistedError,
    BlogError,
    TagNotFoundError,
)
from app.core.security import get_current_user
from app.db.database import get_session
from app.models.user import User
from app.schemas.tag import TagCreate, TagEnvelope, TagListResponse
from app.schemas.user import MessageResponse
from app.services.tag import TagService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=TagEnvelope, status_code=status.HTTP_201_CREATED, summary="Create a new tag")
def create_tag(
    tag: TagCreate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
    tag_service: TagService = Depends(get_tag_service),
):
    """Create a new tag"""
    try:
        db_tag = tag_service.store_tag(tag.name)
        session.commit()
    except AlreadyExistedError as e:
        session.rollback()
        logger.debug("store tag already existed: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except BlogError as e:
        session.rollback()
        logger.error("store tag: %s", e, exc_info=e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_SERVER_ERROR)
    session.refresh(db_tag)
    return {"tag": db_tag}


@router.get("", response_model=TagListResponse, summary="List tags")
def get_tags(
    pagination: Pagination = Depends(),
    name: Optional[str] = Query(default=None, description="substring of the tag name"),
    tag_service: TagService = Depends(get_tag_service),
):
    """List tags with the total count"""
    try:
        tags, count = tag_service.get_tags(pagination.offset, pagination.page_size, name)
    except TagNotFoundError as e:
        logger.debug("get tags not found: %s", e)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TagNotFoundError.message)
    except BlogError as e:
        logger.error("get tags: %s", e, exc_info=e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_SERVER_ERROR)
    return {"tags": tags, "count": count}


@router.get("/{tag_id}", response_model=TagEnvelope, summary="Get a specific tag")
def get_tag(
    tag_id: str,
    tag_service: TagService = Depends(get_tag_service),
):
    """Get a specific tag"""
    try:
        tag = tag_service.get_tag(tag_id)
    except TagNotFoundError as e:
        logger.debug("get tag not found: %s", e)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TagNotFoundError.message)
    except BlogError as e:
        logger.error("get tag: %s", e, exc_info=e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_SERVER_ERROR)
    return {"tag": tag}


@router.delete("/{tag_id}", response_model=MessageResponse, summary="Delete a tag and its post links")
def delete_tag(
    tag_id: str,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
    tag_service: TagService = Depends(get_tag_service),
):
    """Delete a tag"""
    try:
        tag_service.delete_tag(tag_id)
        session.commit()
    except TagNotFoundError as e:
        session.rollback()
        logger.debug("delete tag not found: %s", e)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TagNotFoundError.message)
    except BlogError as e:
        session.rollback()
        logger.error("delete tag: %s", e, exc_info=e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_SERVER_ERROR)
    return {"message": "successfully deleted"}
