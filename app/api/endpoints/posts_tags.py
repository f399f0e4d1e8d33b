import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_posts_tags_service
from app.core.errors import INTERNAL_SERVER_ERROR, BlogError, PostsTagsNotFoundError
from app.core.security import get_current_user
from app.db.database import get_session
from app.models.user import User
from app.schemas.user import MessageResponse
from app.services.posts_tags import PostsTagsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.delete("/{posts_tags_id}", response_model=MessageResponse, summary="Remove one tag link from a post")
def delete_posts_tags(
    posts_tags_id: str,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
    posts_tags_service: PostsTagsService = Depends(get_posts_tags_service),
):
    try:
        posts_tags_service.delete_posts_tags(posts_tags_id)
        session.commit()
    except PostsTagsNotFoundError as e:
        session.rollback()
        logger.debug("delete posts_tags not found: %s", e)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PostsTagsNotFoundError.message)
    except BlogError as e:
        session.rollback()
        logger.error("delete posts_tags: %s", e, exc_info=e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_SERVER_ERROR)
    return {"message": "successfully deleted"}
