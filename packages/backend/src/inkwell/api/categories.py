"""Category API routes. Reads are public, writes are admin-only."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.dependencies import get_current_user, require_role
from inkwell.db.engine import get_db
from inkwell.db.models import Role
from inkwell.logging import get_logger
from inkwell.schemas.category import CategoryRead, CategoryWrite
from inkwell.services.base import parse_id
from inkwell.services.category_service import CategoryService

router = APIRouter(prefix="/categories")

_admin = [Depends(get_current_user), Depends(require_role(Role.ADMIN))]


def _svc(db: AsyncSession = Depends(get_db), logger=Depends(get_logger)) -> CategoryService:
    return CategoryService(db, logger)


@router.get("")
async def list_categories(svc: CategoryService = Depends(_svc)):
    """Active categories, alphabetical."""
    categories = await svc.list_active()
    return {
        "success": True,
        "data": {"categories": [CategoryRead.model_validate(c) for c in categories]},
    }


@router.get("/{category_id}")
async def get_category(category_id: str, svc: CategoryService = Depends(_svc)):
    category = await svc.get(parse_id(category_id))
    return {"success": True, "data": {"category": CategoryRead.model_validate(category)}}


@router.post("", status_code=201, dependencies=_admin)
async def create_category(body: CategoryWrite, svc: CategoryService = Depends(_svc)):
    category = await svc.create(body)
    return {
        "success": True,
        "message": "Category created successfully",
        "data": {"category": CategoryRead.model_validate(category)},
    }


@router.put("/{category_id}", dependencies=_admin)
async def update_category(
    category_id: str,
    body: CategoryWrite,
    svc: CategoryService = Depends(_svc),
):
    category = await svc.update(parse_id(category_id), body)
    return {
        "success": True,
        "message": "Category updated successfully",
        "data": {"category": CategoryRead.model_validate(category)},
    }


@router.delete("/{category_id}", dependencies=_admin)
async def delete_category(category_id: str, svc: CategoryService = Depends(_svc)):
    """Refused while any post still uses the category."""
    await svc.delete(parse_id(category_id))
    return {"success": True, "message": "Category deleted successfully"}
