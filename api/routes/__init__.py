"""API route modules."""

from .admin_routes import router as admin_router
from .health_routes import router as health_router
from .users_routes import router as users_router

__all__ = [
    "admin_router",
    "health_router",
    "users_router",
]
