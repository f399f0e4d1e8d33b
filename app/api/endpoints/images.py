import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_image_service
from app.core.errors import INTERNAL_SERVER_ERROR, ImageStorageError
from app.core.security import get_current_user
from app.models.user import User
from app.schemas.image import PresignedURLResponse
from app.services.image import ImageService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/presigned-url",
    response_model=PresignedURLResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Issue a presigned URL for uploading an image",
)
def get_presigned_url(
    object_name: str = Query(..., alias="objectName", min_length=1),
    content_type: str = Query(..., alias="contentType", min_length=1),
    current_user: User = Depends(get_current_user),
    image_service: ImageService = Depends(get_image_service),
):
    try:
        url = image_service.create_presigned_url(object_name, content_type)
    except ImageStorageError as e:
        logger.error("create presigned url: %s", e, exc_info=e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_SERVER_ERROR)
    return {"signed_url": url}
