from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, List
from app.schemas.tag import TagResponse


class PostUpdate(BaseModel):
    """更新文章请求模型"""
    title: str = Field(default="", max_length=255)
    thumbnail_url: str = Field(default="", max_length=2048)
    content: str = ""
    permalink: Optional[str] = Field(default=None, max_length=255, description="empty means unset")
    is_draft: bool


class PostUpdateRequest(BaseModel):
    """Body of PUT /posts/{post_id}"""
    post: PostUpdate
    tags: List[str] = Field(default_factory=list, description="标签名称列表")


class PostResponse(BaseModel):
    """文章响应模型"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    thumbnail_url: str
    content: str
    permalink: Optional[str] = None
    is_draft: bool
    created_at: datetime
    updated_at: datetime
    published_at: Optional[datetime] = None


class PostWithTagsResponse(PostResponse):
    tags: List[TagResponse] = []


class PostEnvelope(BaseModel):
    post: PostResponse


class PostWithTagsEnvelope(BaseModel):
    post: PostWithTagsResponse


class PostUpdateResponse(BaseModel):
    post: PostResponse
    tags: List[TagResponse]


class PostListResponse(BaseModel):
    posts: List[PostWithTagsResponse]
    count: int
