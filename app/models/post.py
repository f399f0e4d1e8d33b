from datetime import datetime
from typing import Optional
from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from app.db.database import Base
from app.models.common import generate_id, utcnow


class Post(Base):
    """Post model"""
    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    thumbnail_url: Mapped[str] = mapped_column(String(2048), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")  # markdown
    permalink: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)  # NULL while unset
    is_draft: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow
    )
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
