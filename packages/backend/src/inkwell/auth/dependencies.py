"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers and form the
per-request pipeline:

    Unauthenticated ─ token? ─► TokenValidated | Anonymous
                    ─ require_role ─► Authorized | Forbidden
                    ─ require_ownership ─► Authorized | Forbidden

get_current_user / get_current_user_optional resolve the identity and
put it on request.state.user. require_role() and require_ownership()
read it from there, so list them AFTER an authentication dependency in
the route's ``dependencies`` (FastAPI resolves that list in order). Any
rejection raises AccessError, which answers immediately; later
dependencies and the handler never run.
"""

import uuid
from typing import Any, Optional

from fastapi import Depends, Header, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import defer

from inkwell.auth.tokens import TokenService, extract_token, get_token_service
from inkwell.db.engine import get_db
from inkwell.db.models import Role, User
from inkwell.errors import (
    AccessError,
    InvalidTokenError,
    TokenError,
    TokenExpiredError,
)


async def resolve_identity_from_token(
    token: str, db: AsyncSession, tokens: TokenService
) -> User:
    """Verify ``token`` and load the user it names, without the password hash.

    A token for a user that no longer exists raises InvalidTokenError,
    the same as a malformed token, so callers cannot tell them apart.
    """
    claims = tokens.verify_token(token)
    try:
        user_id = uuid.UUID(claims.id)
    except ValueError:
        raise InvalidTokenError()

    result = await db.execute(
        select(User)
        .where(User.id == user_id)
        .options(defer(User.password_hash, raiseload=True))
    )
    user = result.scalars().first()
    if user is None:
        raise InvalidTokenError()
    return user


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> User:
    """Extract current user (required — 401 if missing, invalid or inactive)."""
    token = extract_token(authorization)
    if token is None:
        raise AccessError.no_token()

    try:
        user = await resolve_identity_from_token(token, db, tokens)
    except TokenExpiredError:
        raise AccessError.denied("Token expired")
    except InvalidTokenError:
        raise AccessError.denied()

    if not user.is_active:
        raise AccessError.deactivated()

    request.state.user = user
    return user


async def get_current_user_optional(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> Optional[User]:
    """Extract current user (optional — None instead of any token failure).

    Learn: This is the "soft" variant for public endpoints that behave
    differently for signed-in users. A bad, expired or stale token, or a
    deactivated account, simply means anonymous.
    """
    token = extract_token(authorization)
    if token is None:
        return None

    try:
        user = await resolve_identity_from_token(token, db, tokens)
    except TokenError:
        return None

    if not user.is_active:
        return None

    request.state.user = user
    return user


def _context_user(request: Request) -> Optional[User]:
    return getattr(request.state, "user", None)


def require_role(*roles: str):
    """Only let through users whose role is in ``roles``.

    With no roles, any authenticated user passes.
    """
    allowed = {getattr(r, "value", r) for r in roles}

    async def check_role(request: Request) -> User:
        user = _context_user(request)
        if user is None:
            raise AccessError.auth_required()
        if allowed and user.role not in allowed:
            raise AccessError.forbidden()
        return user

    return check_role


async def _json_body(request: Request) -> Any:
    if not await request.body():
        return None
    try:
        return await request.json()
    except ValueError:
        return None


def _owner_of(resource: Any, owner_field: str) -> Any:
    if resource is None:
        return None
    if isinstance(resource, dict):
        return resource.get(owner_field)
    return getattr(resource, owner_field, None)


def require_ownership(owner_field: str = "author_id"):
    """Only let the resource's owner (or an admin) through.

    The resource is whatever a loader dependency put on
    request.state.resource; without one, the JSON body is checked
    instead. Ownership is id equality compared as strings.
    """

    async def check_ownership(request: Request) -> User:
        user = _context_user(request)
        if user is None:
            raise AccessError.auth_required()

        if user.role == Role.ADMIN.value:
            return user

        resource = getattr(request.state, "resource", None)
        if resource is None:
            resource = await _json_body(request)

        owner = _owner_of(resource, owner_field)
        if owner is not None and str(owner) != str(user.id):
            raise AccessError.forbidden("You can only access your own resources")
        return user

    return check_ownership
