"""Pydantic schemas for posts and likes."""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from inkwell.db.models import PostStatus
from inkwell.schemas.category import CategorySummary
from inkwell.schemas.user import AuthorSummary

TITLE_MAX_LEN = 100
CONTENT_MIN_LEN = 10
TAG_MAX_LEN = 30
EXCERPT_MAX_LEN = 300
STATUSES = [s.value for s in PostStatus]


class PostWrite(BaseModel):
    """Body of POST /posts and PUT /posts/{id}."""

    title: str
    content: str
    category_id: uuid.UUID
    tags: list[str] = []
    status: Optional[str] = None
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        v = v.strip()
        if not 1 <= len(v) <= TITLE_MAX_LEN:
            raise ValueError(f"Title must be between 1 and {TITLE_MAX_LEN} characters")
        return v

    @field_validator("content")
    @classmethod
    def check_content(cls, v: str) -> str:
        v = v.strip()
        if len(v) < CONTENT_MIN_LEN:
            raise ValueError(
                f"Content must be at least {CONTENT_MIN_LEN} characters long"
            )
        return v

    @field_validator("category_id", mode="before")
    @classmethod
    def check_category_id(cls, v: Any) -> Any:
        try:
            return uuid.UUID(str(v))
        except ValueError:
            raise ValueError("Invalid category ID")

    @field_validator("tags", mode="before")
    @classmethod
    def check_tags(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("Tags must be an array")
        tags: list[str] = []
        for tag in v:
            tag = str(tag).strip().lower()
            if not 1 <= len(tag) <= TAG_MAX_LEN:
                raise ValueError(
                    f"Each tag must be between 1 and {TAG_MAX_LEN} characters"
                )
            if tag not in tags:
                tags.append(tag)
        return tags

    @field_validator("status")
    @classmethod
    def check_status(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in STATUSES:
            raise ValueError("Status must be draft, published, or archived")
        return v

    @field_validator("excerpt")
    @classmethod
    def check_excerpt(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > EXCERPT_MAX_LEN:
            raise ValueError(f"Excerpt cannot exceed {EXCERPT_MAX_LEN} characters")
        return v


class PostRead(BaseModel):
    id: uuid.UUID
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    status: str
    tags: list[str]
    featured_image: Optional[str] = None
    views: int
    read_time: int
    like_count: int
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary
    category: CategorySummary

    model_config = {"from_attributes": True}


class LikeResult(BaseModel):
    is_liked: bool
    like_count: int
