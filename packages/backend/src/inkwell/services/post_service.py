"""Post service — posts, tags, views and likes.

Learn: The derived fields (slug, excerpt, read_time, published_at) are
recomputed in one place, _apply_derived(), every time a post is saved.

Visibility: published posts are public. Drafts and archived posts are
visible only to their author and to admins; for anyone else they do not
exist (list filters them out, GET answers 404).
"""

import math
import re
import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.db.models import Category, Post, PostLike, PostStatus, PostTag, User, utcnow
from inkwell.errors import BadRequestError, NotFoundError
from inkwell.schemas.common import PageParams
from inkwell.schemas.post import PostWrite
from inkwell.services.base import commit_or_raise, slugify

WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 150

_HTML_TAG = re.compile(r"<[^>]*>")


def make_excerpt(content: str) -> str:
    """Plain-text preview: tags stripped, first 150 characters + '...'."""
    return _HTML_TAG.sub("", content)[:EXCERPT_LENGTH] + "..."


def reading_time(content: str) -> int:
    """Minutes to read at 200 words per minute, at least 1."""
    return max(1, math.ceil(len(content.split()) / WORDS_PER_MINUTE))


@dataclass
class PostFilters:
    category: Optional[uuid.UUID] = None
    author: Optional[uuid.UUID] = None
    tags: Optional[list[str]] = None
    status: str = PostStatus.PUBLISHED.value  # "all" disables the filter
    search: Optional[str] = None


class PostService:
    """Business logic for posts."""

    def __init__(self, db: AsyncSession, logger):
        self.db = db
        self.log = logger

    # ─── Visibility ─────────────────────────────────────

    @staticmethod
    def _visible_to(viewer: Optional[User]):
        published = Post.status == PostStatus.PUBLISHED.value
        if viewer is None:
            return published
        if viewer.is_admin:
            return None
        return or_(published, Post.author_id == viewer.id)

    @staticmethod
    def can_view(post: Post, viewer: Optional[User]) -> bool:
        if post.status == PostStatus.PUBLISHED.value:
            return True
        return viewer is not None and (viewer.is_admin or post.author_id == viewer.id)

    # ─── Queries ────────────────────────────────────────

    async def get_post(self, post_id: uuid.UUID) -> Optional[Post]:
        result = await self.db.execute(
            select(Post)
            .where(Post.id == post_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def get_visible_post(
        self, post_id: uuid.UUID, viewer: Optional[User] = None
    ) -> Post:
        post = await self.get_post(post_id)
        if post is None or not self.can_view(post, viewer):
            raise NotFoundError("Post not found")
        return post

    async def list_posts(
        self,
        filters: PostFilters,
        params: PageParams,
        viewer: Optional[User] = None,
    ) -> tuple[list[Post], int]:
        conditions = []
        visibility = self._visible_to(viewer)
        if visibility is not None:
            conditions.append(visibility)
        if filters.status and filters.status != "all":
            conditions.append(Post.status == filters.status)
        if filters.category:
            conditions.append(Post.category_id == filters.category)
        if filters.author:
            conditions.append(Post.author_id == filters.author)
        if filters.tags:
            tagged = select(PostTag.post_id).where(
                PostTag.name.in_([t.lower() for t in filters.tags])
            )
            conditions.append(Post.id.in_(tagged))
        if filters.search:
            pattern = f"%{filters.search}%"
            conditions.append(or_(Post.title.ilike(pattern), Post.content.ilike(pattern)))

        total = await self.db.scalar(
            select(func.count()).select_from(Post).where(*conditions)
        )
        result = await self.db.execute(
            select(Post)
            .where(*conditions)
            .order_by(Post.created_at.desc())
            .offset(params.offset)
            .limit(params.limit)
        )
        return list(result.scalars().all()), total or 0

    # ─── Writes ─────────────────────────────────────────

    async def _require_category(self, category_id: uuid.UUID) -> None:
        if await self.db.get(Category, category_id) is None:
            raise BadRequestError("Category not found")

    async def _unique_slug(self, post: Post) -> str:
        """Slug from the title, suffixed with part of the id if another post has it."""
        slug = slugify(post.title) or post.id.hex[:12]
        taken = await self.db.scalar(
            select(Post.id).where(Post.slug == slug, Post.id != post.id)
        )
        return slug if taken is None else f"{slug}-{post.id.hex[:8]}"

    async def _apply_derived(self, post: Post, regenerate_excerpt: bool) -> None:
        post.slug = await self._unique_slug(post)
        if regenerate_excerpt or not post.excerpt:
            post.excerpt = make_excerpt(post.content)
        post.read_time = reading_time(post.content)
        if post.status == PostStatus.PUBLISHED.value and post.published_at is None:
            post.published_at = utcnow()

    @staticmethod
    def _set_tags(post: Post, tags: list[str]) -> None:
        # Keep rows for tags that stay; (post_id, name) is unique
        existing = {row.name: row for row in post.tag_rows}
        rows = []
        for position, name in enumerate(tags):
            row = existing.get(name) or PostTag(name=name)
            row.position = position
            rows.append(row)
        post.tag_rows = rows

    async def create_post(self, author: User, data: PostWrite) -> Post:
        await self._require_category(data.category_id)

        post = Post(
            id=uuid.uuid4(),
            title=data.title,
            content=data.content,
            author_id=author.id,
            category_id=data.category_id,
            status=data.status or PostStatus.DRAFT.value,
            excerpt=data.excerpt,
            featured_image=data.featured_image,
            views=0,
        )
        self._set_tags(post, data.tags)
        await self._apply_derived(post, regenerate_excerpt=not data.excerpt)
        self.db.add(post)
        await commit_or_raise(self.db)
        self.log.info("post.created", post_id=str(post.id), author_id=str(author.id))
        return await self.get_post(post.id)

    async def update_post(self, post: Post, data: PostWrite) -> Post:
        if data.category_id != post.category_id:
            await self._require_category(data.category_id)

        content_changed = data.content != post.content
        changes = data.model_dump(exclude_unset=True)
        tags = changes.pop("tags", None)
        for field, value in changes.items():
            if value is not None:
                setattr(post, field, value)
        if tags is not None:
            self._set_tags(post, tags)
        await self._apply_derived(
            post, regenerate_excerpt=content_changed and not changes.get("excerpt")
        )
        await commit_or_raise(self.db)
        self.log.info("post.updated", post_id=str(post.id))
        return await self.get_post(post.id)

    async def delete_post(self, post: Post) -> None:
        await self.db.delete(post)
        await self.db.commit()
        self.log.info("post.deleted", post_id=str(post.id))

    async def record_view(self, post: Post) -> None:
        """Count one view, incremented in SQL. updated_at is left alone."""
        await self.db.execute(
            update(Post)
            .where(Post.id == post.id)
            .values(views=Post.views + 1, updated_at=Post.updated_at)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        await self.db.refresh(post, attribute_names=["views"])

    async def toggle_like(self, post: Post, user: User) -> tuple[bool, int]:
        """Like the post, or unlike it if already liked. Returns (is_liked, count)."""
        existing = await self.db.scalar(
            select(PostLike.id).where(
                PostLike.post_id == post.id, PostLike.user_id == user.id
            )
        )
        if existing is None:
            self.db.add(PostLike(post_id=post.id, user_id=user.id))
            is_liked = True
        else:
            await self.db.execute(delete(PostLike).where(PostLike.id == existing))
            is_liked = False
        await commit_or_raise(self.db)

        like_count = await self.db.scalar(
            select(func.count()).select_from(PostLike).where(PostLike.post_id == post.id)
        )
        return is_liked, like_count or 0
