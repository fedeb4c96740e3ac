"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Unlike a blanket include_router(dependencies=...), auth is
declared per route here because most routers mix public reads with
authenticated writes. See inkwell.auth.dependencies for the pipeline.
"""

from fastapi import APIRouter

from inkwell.api.auth import router as auth_router
from inkwell.api.categories import router as categories_router
from inkwell.api.health import router as health_router
from inkwell.api.posts import router as posts_router
from inkwell.api.users import router as users_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(categories_router, tags=["categories"])
api_router.include_router(posts_router, tags=["posts"])
