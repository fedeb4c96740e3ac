"""Category service — CRUD for post categories."""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.db.models import Category, Post
from inkwell.errors import BadRequestError, NotFoundError
from inkwell.schemas.category import CategoryWrite
from inkwell.services.base import commit_or_raise, slugify


class CategoryService:
    def __init__(self, db: AsyncSession, logger):
        self.db = db
        self.log = logger

    async def list_active(self) -> list[Category]:
        result = await self.db.execute(
            select(Category).where(Category.is_active.is_(True)).order_by(Category.name)
        )
        return list(result.scalars().all())

    async def get(self, category_id: uuid.UUID) -> Category:
        category = await self.db.get(Category, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    async def create(self, data: CategoryWrite) -> Category:
        category = Category(
            name=data.name,
            slug=slugify(data.name) or uuid.uuid4().hex[:12],
            description=data.description,
        )
        if data.color is not None:
            category.color = data.color
        if data.icon is not None:
            category.icon = data.icon
        if data.is_active is not None:
            category.is_active = data.is_active
        self.db.add(category)
        await commit_or_raise(self.db)
        self.log.info("category.created", category_id=str(category.id), slug=category.slug)
        return category

    async def update(self, category_id: uuid.UUID, data: CategoryWrite) -> Category:
        category = await self.get(category_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(category, field, value)
        category.slug = slugify(category.name) or category.id.hex[:12]
        await commit_or_raise(self.db)
        self.log.info("category.updated", category_id=str(category.id))
        return category

    async def delete(self, category_id: uuid.UUID) -> None:
        category = await self.get(category_id)
        post_count = await self.db.scalar(
            select(func.count()).select_from(Post).where(Post.category_id == category_id)
        )
        if post_count:
            raise BadRequestError("Cannot delete a category that still has posts")
        await self.db.delete(category)
        await self.db.commit()
        self.log.info("category.deleted", category_id=str(category_id))
