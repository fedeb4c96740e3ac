"""Helpers shared by the service classes.

Learn: Failures are tagged where they happen. A malformed id becomes
InvalidIdError in parse_id(); a unique-constraint violation becomes
DuplicateKeyError in commit_or_raise(), with the offending column
parsed out of the driver's message (SQLite and PostgreSQL phrase it
differently).
"""

import re
import uuid
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.errors import DuplicateKeyError, InvalidIdError

_DUPLICATE_PATTERNS = (
    # SQLite: UNIQUE constraint failed: users.email
    re.compile(r"UNIQUE constraint failed: \w+\.(\w+)"),
    # PostgreSQL: DETAIL:  Key (email)=(a@b.c) already exists.
    re.compile(r"Key \((\w+)\)=\(.*\) already exists"),
)

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def parse_id(value: Any) -> uuid.UUID:
    """Parse a path/query id, or raise InvalidIdError."""
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise InvalidIdError(value)


def slugify(text: str) -> str:
    """'Hello, World!' → 'hello-world'."""
    return _SLUG_STRIP.sub("-", text.lower()).strip("-")


def duplicate_field(exc: IntegrityError) -> Optional[str]:
    """Name of the column a unique-constraint violation is about, if any."""
    text = str(exc.orig)
    for pattern in _DUPLICATE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


async def commit_or_raise(db: AsyncSession) -> None:
    """Commit, turning unique-constraint violations into DuplicateKeyError."""
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        field = duplicate_field(exc)
        if field is None:
            raise
        raise DuplicateKeyError(field) from exc
