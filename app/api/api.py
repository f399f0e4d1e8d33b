from fastapi import APIRouter
from app.api.endpoints import (
    auth,
    images,
    posts,
    posts_tags,
    tags
)

api_router = APIRouter()

api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(tags.router, prefix="/tags", tags=["tags"])
api_router.include_router(posts_tags.router, prefix="/posts-tags", tags=["posts_tags"])
api_router.include_router(images.router, prefix="/images", tags=["images"])
