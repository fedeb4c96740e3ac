"""Pydantic schemas for categories."""

import re
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

NAME_MAX_LEN = 50
DESCRIPTION_MAX_LEN = 200
COLOR_PATTERN = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")


class CategoryWrite(BaseModel):
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        v = v.strip()
        if not 1 <= len(v) <= NAME_MAX_LEN:
            raise ValueError(
                f"Category name must be between 1 and {NAME_MAX_LEN} characters"
            )
        return v

    @field_validator("description")
    @classmethod
    def check_description(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if len(v) > DESCRIPTION_MAX_LEN:
            raise ValueError(
                f"Description cannot exceed {DESCRIPTION_MAX_LEN} characters"
            )
        return v

    @field_validator("color")
    @classmethod
    def check_color(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not COLOR_PATTERN.match(v):
            raise ValueError("Color must be a valid hex color")
        return v


class CategorySummary(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    color: str

    model_config = {"from_attributes": True}


class CategoryRead(CategorySummary):
    description: Optional[str] = None
    icon: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
