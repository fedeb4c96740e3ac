"""User representations. None of them carries the password hash."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserPublic(BaseModel):
    """What a user sees about themselves (and admins see about anyone)."""

    id: uuid.UUID
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: str
    bio: Optional[str] = None
    avatar: Optional[str] = None
    role: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AuthorSummary(BaseModel):
    id: uuid.UUID
    username: str
    full_name: str
    avatar: Optional[str] = None

    model_config = {"from_attributes": True}


class PostSummary(BaseModel):
    id: uuid.UUID
    title: str
    slug: str
    created_at: datetime

    model_config = {"from_attributes": True}


class UserProfile(BaseModel):
    """Public profile — no email, plus the user's published posts."""

    id: uuid.UUID
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: str
    bio: Optional[str] = None
    avatar: Optional[str] = None
    role: str
    created_at: datetime
    posts: list[PostSummary] = []

    model_config = {"from_attributes": True}
