"""User service — registration, login, profiles and the admin user list.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the database. The CLI's seed
and create-admin commands reuse the same methods.
"""

import uuid
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.password import (
    DEFAULT_ROUNDS,
    hash_password_async,
    verify_password_async,
)
from inkwell.db.models import Post, PostStatus, Role, User, utcnow
from inkwell.errors import (
    AccountDeactivatedError,
    BadRequestError,
    DuplicateKeyError,
    InvalidCredentialsError,
    NotFoundError,
)
from inkwell.schemas.auth import ProfileUpdate, RegisterRequest
from inkwell.schemas.common import PageParams
from inkwell.services.base import commit_or_raise


class UserService:
    """Business logic for user accounts."""

    def __init__(self, db: AsyncSession, logger, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.db = db
        self.log = logger
        self.bcrypt_rounds = bcrypt_rounds

    # ─── Registration & login ───────────────────────────

    async def register(self, data: RegisterRequest, role: Role = Role.USER) -> User:
        """Create an account. Duplicate email/username → DuplicateKeyError."""
        result = await self.db.execute(
            select(User).where(
                or_(User.email == data.email, User.username == data.username)
            )
        )
        existing = result.scalars().first()
        if existing:
            raise DuplicateKeyError(
                "email" if existing.email == data.email else "username"
            )

        user = User(
            username=data.username,
            email=data.email,
            password_hash=await hash_password_async(data.password, self.bcrypt_rounds),
            first_name=data.first_name,
            last_name=data.last_name,
            role=role.value,
        )
        self.db.add(user)
        await commit_or_raise(self.db)
        self.log.info("user.registered", user_id=str(user.id), role=user.role)
        return user

    async def find_by_identifier(self, identifier: str) -> Optional[User]:
        """Look a user up by email (case-insensitive) or username."""
        result = await self.db.execute(
            select(User).where(
                or_(User.email == identifier.lower(), User.username == identifier)
            )
        )
        return result.scalars().first()

    async def authenticate(self, identifier: str, password: str) -> User:
        """Check credentials and record the login.

        Learn: The active flag is checked only after the password, so a
        deactivated account with the right password is told so, while a
        wrong password never reveals whether the account exists.
        """
        user = await self.find_by_identifier(identifier)
        if user is None:
            raise InvalidCredentialsError()

        if not await verify_password_async(password, user.password_hash):
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDeactivatedError()

        user.last_login = utcnow()
        await commit_or_raise(self.db)
        self.log.info("user.logged_in", user_id=str(user.id))
        return user

    # ─── Profile ────────────────────────────────────────

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        await commit_or_raise(self.db)
        self.log.info("user.profile_updated", user_id=str(user.id))
        return user

    async def change_password(
        self, user: User, current_password: str, new_password: str
    ) -> None:
        # The request identity is loaded without its hash; fetch it on its own.
        current_hash = await self.db.scalar(
            select(User.password_hash).where(User.id == user.id)
        )
        if current_hash is None or not await verify_password_async(
            current_password, current_hash
        ):
            raise BadRequestError("Current password is incorrect")

        user.password_hash = await hash_password_async(new_password, self.bcrypt_rounds)
        await commit_or_raise(self.db)
        self.log.info("user.password_changed", user_id=str(user.id))

    # ─── Lookups ────────────────────────────────────────

    async def get_user(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_public_profile(self, user_id: uuid.UUID) -> tuple[User, list[Post]]:
        """The user plus their published posts, newest first."""
        user = await self.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")

        result = await self.db.execute(
            select(Post)
            .where(
                Post.author_id == user_id,
                Post.status == PostStatus.PUBLISHED.value,
            )
            .order_by(Post.created_at.desc())
        )
        return user, list(result.scalars().all())

    async def update_account(
        self,
        user_id: uuid.UUID,
        is_active: Optional[bool] = None,
        role: Optional[Role] = None,
    ) -> User:
        """Admin-only: (de)activate an account or change its role.

        Tokens already issued keep the old role in their claims until they
        expire. Authorization reads the stored user, so the change applies
        to the next request either way.
        """
        user = await self.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        if is_active is not None:
            user.is_active = is_active
        if role is not None:
            user.role = role.value
        await commit_or_raise(self.db)
        self.log.info(
            "user.account_updated",
            user_id=str(user.id),
            is_active=user.is_active,
            role=user.role,
        )
        return user

    async def list_users(
        self,
        params: PageParams,
        search: Optional[str] = None,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> tuple[list[User], int]:
        """Admin listing with search over username/email/names."""
        conditions = []
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(
                    User.username.ilike(pattern),
                    User.email.ilike(pattern),
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                )
            )
        if role:
            conditions.append(User.role == role)
        if is_active is not None:
            conditions.append(User.is_active == is_active)

        total = await self.db.scalar(
            select(func.count()).select_from(User).where(*conditions)
        )
        result = await self.db.execute(
            select(User)
            .where(*conditions)
            .order_by(User.created_at.desc())
            .offset(params.offset)
            .limit(params.limit)
        )
        return list(result.scalars().all()), total or 0
