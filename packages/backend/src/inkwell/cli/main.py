"""Inkwell CLI — run the server and manage the database.

Usage:
    inkwell serve --port 8000 --reload       # Start the API server
    inkwell seed                             # Recreate tables + sample data
    inkwell create-admin alice alice@example.com --password s3cret!
"""

from __future__ import annotations

import asyncio
import sys

import click
import uvicorn
from pydantic import ValidationError

from inkwell import __version__
from inkwell.config import Settings
from inkwell.db.engine import build_engine, build_session_factory, create_schema
from inkwell.db.models import Role
from inkwell.errors import AppError, ValidationFailedError
from inkwell.logging import configure_logging
from inkwell.schemas.auth import RegisterRequest
from inkwell.services.seed_service import SAMPLE_PASSWORD, seed_database
from inkwell.services.user_service import UserService
from inkwell.validation import validate_payload

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _settings() -> Settings:
    """Load settings from the environment, or exit with the reason."""
    try:
        return Settings()
    except ValidationError as e:
        click.secho(f"Error: invalid configuration\n{e}", fg="red", err=True)
        sys.exit(1)


async def _with_session(settings: Settings, work, *, reset: bool = False):
    """Open an engine + session for one command, run ``work(db, logger)``."""
    logger = configure_logging(settings)
    engine = build_engine(settings)
    try:
        await create_schema(engine, drop_first=reset)
        async with build_session_factory(engine)() as db:
            return await work(db, logger)
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="inkwell")
def cli():
    """Inkwell — blog platform API."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: INKWELL_HOST).")
@click.option("--port", type=int, default=None, help="Port (default: INKWELL_PORT).")
@click.option("--reload", is_flag=True, help="Restart on code changes.")
def serve(host: str | None, port: int | None, reload: bool):
    """Start the API server."""
    settings = _settings()
    uvicorn.run(
        "inkwell.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command()
@click.confirmation_option(prompt="This drops all tables. Continue?")
def seed():
    """Drop and recreate all tables, then insert sample data."""
    settings = _settings()

    async def work(db, logger):
        return await seed_database(db, logger, bcrypt_rounds=settings.bcrypt_rounds)

    counts = asyncio.run(_with_session(settings, work, reset=True))
    click.secho(
        f"Seeded {counts['users']} users, {counts['categories']} categories "
        f"and {counts['posts']} posts.",
        fg="green",
    )
    click.echo(f"Sample accounts use the password {SAMPLE_PASSWORD!r}.")


@cli.command("create-admin")
@click.argument("username")
@click.argument("email")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Admin password (prompted when omitted).",
)
def create_admin(username: str, email: str, password: str):
    """Create an admin account."""
    settings = _settings()

    try:
        data = validate_payload(
            RegisterRequest,
            {"username": username, "email": email, "password": password},
        )
    except ValidationFailedError as e:
        for violation in e.violations:
            click.secho(f"Error: {violation.message}", fg="red", err=True)
        sys.exit(1)

    async def work(db, logger):
        svc = UserService(db, logger, bcrypt_rounds=settings.bcrypt_rounds)
        return await svc.register(data, role=Role.ADMIN)

    try:
        user = asyncio.run(_with_session(settings, work))
    except AppError as e:
        click.secho(f"Error: {e.message}", fg="red", err=True)
        sys.exit(1)

    click.secho(f"Created admin {user.username} ({user.id})", fg="green")
