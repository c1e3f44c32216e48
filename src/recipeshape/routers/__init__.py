"""API routers for the recipeshape service."""

from recipeshape.routers.recipes import router as recipes_router
from recipeshape.routers.store import router as store_router

__all__ = [
    "recipes_router",
    "store_router",
]
