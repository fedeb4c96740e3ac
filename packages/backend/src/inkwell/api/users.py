"""User API routes — admin listing and account changes, public profiles.

Learn: Admin routes stack two dependencies: get_current_user
authenticates, require_role(Role.ADMIN) authorizes. Order matters,
the role check reads the identity the first one stored.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.api.pagination import page_params
from inkwell.auth.dependencies import get_current_user, require_role
from inkwell.config import Settings, get_settings
from inkwell.db.engine import get_db
from inkwell.db.models import Role
from inkwell.logging import get_logger
from inkwell.schemas.common import PageParams, Pagination
from inkwell.schemas.user import PostSummary, UserProfile, UserPublic
from inkwell.services.base import parse_id
from inkwell.services.user_service import UserService

router = APIRouter(prefix="/users")

_admin = [Depends(get_current_user), Depends(require_role(Role.ADMIN))]


class AccountUpdate(BaseModel):
    is_active: Optional[bool] = None
    role: Optional[Role] = None


def _svc(
    db: AsyncSession = Depends(get_db),
    logger=Depends(get_logger),
    settings: Settings = Depends(get_settings),
) -> UserService:
    return UserService(db, logger, bcrypt_rounds=settings.bcrypt_rounds)


@router.get("", dependencies=_admin)
async def list_users(
    params: PageParams = Depends(page_params),
    search: Optional[str] = None,
    role: Optional[Role] = None,
    is_active: Optional[bool] = None,
    svc: UserService = Depends(_svc),
):
    """Admin only. Paginated, searchable user list."""
    users, total = await svc.list_users(
        params,
        search=search,
        role=role.value if role else None,
        is_active=is_active,
    )
    return {
        "success": True,
        "data": {
            "users": [UserPublic.model_validate(u) for u in users],
            "pagination": Pagination.build(params, total),
        },
    }


@router.get("/{user_id}")
async def get_user_profile(user_id: str, svc: UserService = Depends(_svc)):
    """Public profile with the user's published posts."""
    user, posts = await svc.get_public_profile(parse_id(user_id))
    profile = UserProfile.model_validate(user).model_copy(
        update={"posts": [PostSummary.model_validate(p) for p in posts]}
    )
    return {"success": True, "data": {"user": profile}}


@router.patch("/{user_id}", dependencies=_admin)
async def update_account(
    user_id: str,
    body: AccountUpdate,
    svc: UserService = Depends(_svc),
):
    """Admin only. Activate/deactivate an account or change its role."""
    user = await svc.update_account(
        parse_id(user_id), is_active=body.is_active, role=body.role
    )
    return {
        "success": True,
        "message": "User updated successfully",
        "data": {"user": UserPublic.model_validate(user)},
    }
