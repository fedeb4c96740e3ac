"""Test fixtures — one fresh app + in-memory database per test.

Learn: create_app() takes its settings as an argument, so each test
builds its own app against sqlite+aiosqlite:// (in-memory, one shared
connection via StaticPool) and nothing leaks between tests. bcrypt runs
at its minimum cost factor to keep the suite fast.

ASGITransport does not run the lifespan, so the schema is created here
and the engine disposed afterwards.

raise_app_exceptions=False lets tests see the 500 envelope for
unexpected errors instead of the exception itself.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from inkwell.config import Settings
from inkwell.db.engine import create_schema
from inkwell.db.models import Category, Role, User
from inkwell.main import create_app

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
PASSWORD = "password123"


@pytest.fixture()
def settings():
    return Settings(
        jwt_secret=TEST_SECRET,
        database_url="sqlite+aiosqlite://",
        environment="test",
        bcrypt_rounds=4,
    )


@pytest_asyncio.fixture()
async def app(settings):
    application = create_app(settings)
    await create_schema(application.state.engine)
    try:
        yield application
    finally:
        await application.state.engine.dispose()


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def _unique(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


@pytest.fixture()
def register(client):
    """Register a user through the API → (user dict, token)."""

    async def _register(username: str | None = None, password: str = PASSWORD, **extra):
        username = username or _unique("user")
        r = await client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": f"{username.lower()}@example.com",
                "password": password,
                **extra,
            },
        )
        assert r.status_code == 201, r.text
        data = r.json()["data"]
        return data["user"], data["token"]

    return _register


@pytest.fixture()
def make_admin(app, register):
    """Register a user, promote it to admin → (user dict, token)."""

    async def _make_admin():
        user, token = await register(_unique("admin"))
        async with app.state.session_factory() as session:
            row = await session.get(User, uuid.UUID(user["id"]))
            row.role = Role.ADMIN.value
            await session.commit()
        # Role claims are informational; authorization reads the stored role
        return {**user, "role": Role.ADMIN.value}, token

    return _make_admin


@pytest_asyncio.fixture()
async def category(app):
    async with app.state.session_factory() as session:
        row = Category(name="Technology", slug="technology")
        session.add(row)
        await session.commit()
        return row
