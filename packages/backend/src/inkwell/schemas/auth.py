"""Pydantic schemas for registration, login and profile changes.

Learn: The rule messages live in the validators, so a failed payload
reports e.g. ["Username must be between 3 and 30 characters",
"Password must be at least 6 characters long"] — see inkwell.validation.

Bodies take snake_case or camelCase keys (first_name or firstName);
errors always name the snake_case field.
"""

import re
from typing import Optional
from urllib.parse import urlparse

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 30
PASSWORD_MIN_LEN = 6
NAME_MAX_LEN = 50
BIO_MAX_LEN = 500

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")

# Accept both key styles for request bodies
CAMEL_CASE_INPUT = ConfigDict(
    alias_generator=to_camel, populate_by_name=True, loc_by_alias=False
)


def _check_name(v: Optional[str], label: str) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    if len(v) > NAME_MAX_LEN:
        raise ValueError(f"{label} cannot exceed {NAME_MAX_LEN} characters")
    return v or None


def _check_new_password(v: str, label: str) -> str:
    if len(v) < PASSWORD_MIN_LEN:
        raise ValueError(f"{label} must be at least {PASSWORD_MIN_LEN} characters long")
    return v


def normalize_email(v: str) -> str:
    try:
        validate_email(v.strip(), check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Please enter a valid email")
    return v.strip().lower()


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    model_config = CAMEL_CASE_INPUT

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        v = v.strip()
        if not USERNAME_MIN_LEN <= len(v) <= USERNAME_MAX_LEN:
            raise ValueError(
                f"Username must be between {USERNAME_MIN_LEN} and "
                f"{USERNAME_MAX_LEN} characters"
            )
        if not USERNAME_PATTERN.match(v):
            raise ValueError(
                "Username can only contain letters, numbers, and underscores"
            )
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _check_new_password(v, "Password")

    @field_validator("first_name")
    @classmethod
    def check_first_name(cls, v: Optional[str]) -> Optional[str]:
        return _check_name(v, "First name")

    @field_validator("last_name")
    @classmethod
    def check_last_name(cls, v: Optional[str]) -> Optional[str]:
        return _check_name(v, "Last name")


class LoginRequest(BaseModel):
    identifier: str  # username or email
    password: str

    @field_validator("identifier")
    @classmethod
    def check_identifier(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username or email is required")
        return v

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None

    model_config = CAMEL_CASE_INPUT

    @field_validator("first_name")
    @classmethod
    def check_first_name(cls, v: Optional[str]) -> Optional[str]:
        return _check_name(v, "First name")

    @field_validator("last_name")
    @classmethod
    def check_last_name(cls, v: Optional[str]) -> Optional[str]:
        return _check_name(v, "Last name")

    @field_validator("bio")
    @classmethod
    def check_bio(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if len(v) > BIO_MAX_LEN:
            raise ValueError(f"Bio cannot exceed {BIO_MAX_LEN} characters")
        return v

    @field_validator("avatar")
    @classmethod
    def check_avatar(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Avatar must be a valid URL")
        return v


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str

    model_config = CAMEL_CASE_INPUT

    @field_validator("current_password")
    @classmethod
    def check_current_password(cls, v: str) -> str:
        if not v:
            raise ValueError("Current password is required")
        return v

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, v: str) -> str:
        return _check_new_password(v, "New password")
