"""FastAPI application factory.

Learn: App factory pattern — create_app() builds every component from
one Settings object and hangs it on app.state:

    settings → logger → engine → session factory → token service

Route dependencies (get_db, get_logger, get_token_service, ...) read
them back from there, so a test builds its own app with its own
settings and nothing is shared through module globals.

Run with: uvicorn --factory inkwell.main:create_app
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inkwell import __version__
from inkwell.api import api_router
from inkwell.auth.tokens import TokenService
from inkwell.config import Settings
from inkwell.db.engine import build_engine, build_session_factory, create_schema
from inkwell.errors.handlers import register_error_handlers
from inkwell.logging import configure_logging
from inkwell.middleware.request_logger import RequestLoggerMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs
    at shutdown.
    """
    settings: Settings = app.state.settings
    logger = app.state.logger
    logger.info(
        "inkwell.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    if settings.create_schema:
        await create_schema(app.state.engine)
        logger.info("inkwell.schema_created")

    yield

    logger.info("inkwell.shutdown")
    await app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or Settings()

    app = FastAPI(
        title="Inkwell",
        description="Blog platform API — accounts, posts, categories and likes",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.logger = configure_logging(settings)
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.tokens = TokenService(settings)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette runs middleware in reverse order of registration.
    # Request flow: RequestLogger → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggerMiddleware)

    register_error_handlers(app)
    app.include_router(api_router)

    return app
