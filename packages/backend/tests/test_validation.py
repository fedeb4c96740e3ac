"""Payload rules and how their failures are reported."""

import uuid

import pytest

from inkwell.errors import ValidationFailedError
from inkwell.schemas.auth import ChangePasswordRequest, ProfileUpdate, RegisterRequest
from inkwell.schemas.category import CategoryWrite
from inkwell.schemas.common import PageParams
from inkwell.schemas.post import PostWrite
from inkwell.validation import validate_payload


def _messages(model, data) -> list[str]:
    with pytest.raises(ValidationFailedError) as exc_info:
        validate_payload(model, data)
    return [v.message for v in exc_info.value.violations]


def test_register_reports_every_broken_rule():
    messages = _messages(
        RegisterRequest,
        {"username": "ab", "email": "not-an-email", "password": "123"},
    )
    assert "Username must be between 3 and 30 characters" in messages
    assert "Please enter a valid email" in messages
    assert "Password must be at least 6 characters long" in messages


def test_username_characters():
    messages = _messages(
        RegisterRequest,
        {"username": "bad name!", "email": "a@example.com", "password": "password123"},
    )
    assert messages == ["Username can only contain letters, numbers, and underscores"]


def test_missing_field_is_required():
    messages = _messages(RegisterRequest, {"username": "alice", "password": "password123"})
    assert messages == ["email is required"]


def test_email_is_lowercased():
    data = validate_payload(
        RegisterRequest,
        {"username": "alice", "email": "Alice@Example.COM", "password": "password123"},
    )
    assert data.email == "alice@example.com"


def test_camel_case_keys_accepted_and_errors_use_field_names():
    data = validate_payload(
        ChangePasswordRequest, {"currentPassword": "old-pass", "newPassword": "new-pass"}
    )
    assert data.current_password == "old-pass"
    assert _messages(ChangePasswordRequest, {"newPassword": "new-pass"}) == [
        "current_password is required"
    ]


def test_profile_avatar_must_be_url():
    assert _messages(ProfileUpdate, {"avatar": "not a url"}) == [
        "Avatar must be a valid URL"
    ]


def test_post_rules():
    messages = _messages(
        PostWrite,
        {"title": "", "content": "short", "category_id": "nope", "status": "live"},
    )
    assert "Content must be at least 10 characters long" in messages
    assert "Invalid category ID" in messages
    assert "Status must be draft, published, or archived" in messages
    assert len(messages) == 4


def test_post_tags_lowercased_and_deduplicated():
    data = validate_payload(
        PostWrite,
        {
            "title": "Hello",
            "content": "Long enough content",
            "category_id": str(uuid.uuid4()),
            "tags": ["Python", "python", " API "],
        },
    )
    assert data.tags == ["python", "api"]


def test_post_tags_must_be_array():
    messages = _messages(
        PostWrite,
        {
            "title": "Hello",
            "content": "Long enough content",
            "category_id": str(uuid.uuid4()),
            "tags": "python",
        },
    )
    assert messages == ["Tags must be an array"]


def test_category_color():
    assert _messages(CategoryWrite, {"name": "Tech", "color": "blue"}) == [
        "Color must be a valid hex color"
    ]


@pytest.mark.parametrize(
    "params,message",
    [
        ({"page": 0}, "Page must be a positive integer"),
        ({"limit": 0}, "Limit must be between 1 and 100"),
        ({"limit": 101}, "Limit must be between 1 and 100"),
    ],
)
def test_page_params(params, message):
    assert _messages(PageParams, params) == [message]


def test_page_offset():
    assert validate_payload(PageParams, {"page": 3, "limit": 20}).offset == 40
