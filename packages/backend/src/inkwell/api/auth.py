"""Auth API — registration, login, current user, profile, password.

Learn: Routes for the account lifecycle:
- POST /auth/register → create account, returns user + token
- POST /auth/login → username/email + password → user + token
- GET /auth/me → current user
- PUT /auth/profile → update display fields
- PUT /auth/change-password → verify current, set new

There is no logout route: tokens are stateless and the client simply
discards its copy.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.dependencies import get_current_user
from inkwell.auth.tokens import TokenService, get_token_service
from inkwell.config import Settings, get_settings
from inkwell.db.engine import get_db
from inkwell.db.models import User
from inkwell.logging import get_logger
from inkwell.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
)
from inkwell.schemas.user import UserPublic
from inkwell.services.user_service import UserService

router = APIRouter(prefix="/auth")


def _svc(
    db: AsyncSession = Depends(get_db),
    logger=Depends(get_logger),
    settings: Settings = Depends(get_settings),
) -> UserService:
    return UserService(db, logger, bcrypt_rounds=settings.bcrypt_rounds)


# ─── Register / login ────────────────────────────────────


@router.post("/register", status_code=201)
async def register(
    body: RegisterRequest,
    svc: UserService = Depends(_svc),
    tokens: TokenService = Depends(get_token_service),
):
    """Create a new user account and sign it in."""
    user = await svc.register(body)
    return {
        "success": True,
        "message": "User registered successfully",
        "data": {"user": UserPublic.model_validate(user), "token": tokens.issue_token(user)},
    }


@router.post("/login")
async def login(
    body: LoginRequest,
    svc: UserService = Depends(_svc),
    tokens: TokenService = Depends(get_token_service),
):
    """Login with username or email and password → token."""
    user = await svc.authenticate(body.identifier, body.password)
    return {
        "success": True,
        "message": "Login successful",
        "data": {"user": UserPublic.model_validate(user), "token": tokens.issue_token(user)},
    }


# ─── Current user ───────────────────────────────────────


@router.get("/me")
async def get_me(user: User = Depends(get_current_user)):
    """Get the current authenticated user's info."""
    return {"success": True, "data": {"user": UserPublic.model_validate(user)}}


@router.put("/profile")
async def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    user = await svc.update_profile(user, body)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "data": {"user": UserPublic.model_validate(user)},
    }


@router.put("/change-password")
async def change_password(
    body: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    await svc.change_password(user, body.current_password, body.new_password)
    return {"success": True, "message": "Password changed successfully"}
