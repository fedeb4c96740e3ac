"""Post API routes — listing, reading, writing and likes.

Learn: Routes that modify a post run three dependencies in order:

    get_current_user → load_post → require_ownership("author_id")

load_post fetches the post and stores it on request.state.resource,
which is where require_ownership looks for the owner. The handler then
asks for load_post again and gets the cached post (FastAPI resolves a
dependency once per request).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.api.pagination import page_params
from inkwell.auth.dependencies import (
    get_current_user,
    get_current_user_optional,
    require_ownership,
)
from inkwell.db.engine import get_db
from inkwell.db.models import Post, User
from inkwell.logging import get_logger
from inkwell.schemas.common import PageParams, Pagination
from inkwell.schemas.post import LikeResult, PostRead, PostWrite
from inkwell.services.base import parse_id
from inkwell.services.post_service import PostFilters, PostService

router = APIRouter(prefix="/posts")


def _svc(db: AsyncSession = Depends(get_db), logger=Depends(get_logger)) -> PostService:
    return PostService(db, logger)


async def load_post(
    post_id: str, request: Request, svc: PostService = Depends(_svc)
) -> Post:
    """Fetch the post named in the path and expose it for ownership checks."""
    viewer = getattr(request.state, "user", None)
    post = await svc.get_visible_post(parse_id(post_id), viewer)
    request.state.resource = post
    return post


_owner = [
    Depends(get_current_user),
    Depends(load_post),
    Depends(require_ownership("author_id")),
]


def _split_tags(tags: Optional[str]) -> Optional[list[str]]:
    if not tags:
        return None
    return [t.strip() for t in tags.split(",") if t.strip()] or None


# ─── Reads ──────────────────────────────────────────────


@router.get("")
async def list_posts(
    params: PageParams = Depends(page_params),
    category: Optional[str] = None,
    author: Optional[str] = None,
    tags: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    viewer: Optional[User] = Depends(get_current_user_optional),
    svc: PostService = Depends(_svc),
):
    """Published posts, newest first.

    ?tags= is comma separated. ?status= can select drafts/archived or
    "all", but only the viewer's own (admins see everything).
    """
    filters = PostFilters(
        category=parse_id(category) if category else None,
        author=parse_id(author) if author else None,
        tags=_split_tags(tags),
        status=status or "published",
        search=search,
    )
    posts, total = await svc.list_posts(filters, params, viewer)
    return {
        "success": True,
        "data": {
            "posts": [PostRead.model_validate(p) for p in posts],
            "pagination": Pagination.build(params, total),
        },
    }


@router.get("/{post_id}")
async def get_post(
    post_id: str,
    viewer: Optional[User] = Depends(get_current_user_optional),
    svc: PostService = Depends(_svc),
):
    """Read one post. Every read counts as a view."""
    post = await svc.get_visible_post(parse_id(post_id), viewer)
    await svc.record_view(post)
    return {"success": True, "data": {"post": PostRead.model_validate(post)}}


# ─── Writes ─────────────────────────────────────────────


@router.post("", status_code=201)
async def create_post(
    body: PostWrite,
    user: User = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    post = await svc.create_post(user, body)
    return {
        "success": True,
        "message": "Post created successfully",
        "data": {"post": PostRead.model_validate(post)},
    }


@router.put("/{post_id}", dependencies=_owner)
async def update_post(
    body: PostWrite,
    post: Post = Depends(load_post),
    svc: PostService = Depends(_svc),
):
    """Author or admin only."""
    post = await svc.update_post(post, body)
    return {
        "success": True,
        "message": "Post updated successfully",
        "data": {"post": PostRead.model_validate(post)},
    }


@router.delete("/{post_id}", dependencies=_owner)
async def delete_post(
    post: Post = Depends(load_post),
    svc: PostService = Depends(_svc),
):
    """Author or admin only."""
    await svc.delete_post(post)
    return {"success": True, "message": "Post deleted successfully"}


# ─── Likes ──────────────────────────────────────────────


@router.post("/{post_id}/like")
async def toggle_like(
    post_id: str,
    user: User = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    """Like a post, or take the like back if it is already liked."""
    post = await svc.get_visible_post(parse_id(post_id), user)
    is_liked, like_count = await svc.toggle_like(post, user)
    return {
        "success": True,
        "message": "Post liked" if is_liked else "Post unliked",
        "data": LikeResult(is_liked=is_liked, like_count=like_count),
    }
