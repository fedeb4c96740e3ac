"""Sample data for local development and demos.

Learn: Seeding goes through the same services the API uses, so the
sample rows get real password hashes, slugs, excerpts and read times.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.password import DEFAULT_ROUNDS
from inkwell.db.models import Role
from inkwell.schemas.auth import RegisterRequest
from inkwell.schemas.category import CategoryWrite
from inkwell.schemas.post import PostWrite
from inkwell.services.category_service import CategoryService
from inkwell.services.post_service import PostService
from inkwell.services.user_service import UserService

SAMPLE_PASSWORD = "password123"

SAMPLE_USERS = [
    ("testuser", "test@example.com", "Test", "User", Role.USER),
    ("admin", "admin@example.com", "Admin", "User", Role.ADMIN),
]

SAMPLE_CATEGORIES = [
    ("Technology", "Posts about technology and programming", "#3b82f6"),
    ("Lifestyle", "Posts about lifestyle and personal development", "#10b981"),
    ("Business", "Posts about business and entrepreneurship", "#f59e0b"),
]

# (title, content, author index, category index, status, tags)
SAMPLE_POSTS = [
    (
        "Getting Started with FastAPI",
        "This is a comprehensive guide to getting started with FastAPI. "
        "We will cover routing, dependencies, validation and async database access.",
        0, 0, "published", ["python", "fastapi", "api"],
    ),
    (
        "Building Scalable APIs with SQLAlchemy",
        "Learn how to build scalable and maintainable APIs on top of SQLAlchemy "
        "and the patterns that keep the data layer easy to test.",
        1, 0, "published", ["sqlalchemy", "api", "backend"],
    ),
    (
        "Work-Life Balance in Tech",
        "Maintaining work-life balance while working in the tech industry can be "
        "challenging. Here are some tips and strategies.",
        0, 1, "draft", ["lifestyle", "tech", "productivity"],
    ),
]


async def seed_database(
    db: AsyncSession, logger, bcrypt_rounds: int = DEFAULT_ROUNDS
) -> dict[str, int]:
    """Insert the sample users, categories and posts into an empty schema."""
    users_svc = UserService(db, logger, bcrypt_rounds=bcrypt_rounds)
    categories_svc = CategoryService(db, logger)
    posts_svc = PostService(db, logger)

    users = []
    for username, email, first, last, role in SAMPLE_USERS:
        data = RegisterRequest(
            username=username,
            email=email,
            password=SAMPLE_PASSWORD,
            first_name=first,
            last_name=last,
        )
        users.append(await users_svc.register(data, role=role))

    categories = []
    for name, description, color in SAMPLE_CATEGORIES:
        categories.append(
            await categories_svc.create(
                CategoryWrite(name=name, description=description, color=color)
            )
        )

    for title, content, author, category, status, tags in SAMPLE_POSTS:
        await posts_svc.create_post(
            users[author],
            PostWrite(
                title=title,
                content=content,
                category_id=categories[category].id,
                status=status,
                tags=tags,
            ),
        )

    counts = {
        "users": len(SAMPLE_USERS),
        "categories": len(SAMPLE_CATEGORIES),
        "posts": len(SAMPLE_POSTS),
    }
    logger.info("seed.completed", **counts)
    return counts
