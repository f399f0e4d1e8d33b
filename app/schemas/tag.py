from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import List


class TagCreate(BaseModel):
    """创建标签请求模型"""
    name: str = Field(..., min_length=1, max_length=255, description="标签名称")


class TagResponse(BaseModel):
    """标签响应模型"""
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="标签ID")
    name: str = Field(..., description="标签名称")
    created_at: datetime = Field(..., description="创建时间")
    updated_at: datetime = Field(..., description="更新时间")


class TagEnvelope(BaseModel):
    tag: TagResponse


class TagListResponse(BaseModel):
    tags: List[TagResponse]
    count: int
