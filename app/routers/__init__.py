"""API routers for the GCP Project Manager API."""

from app.routers.auth import router as auth_router
from app.routers.users import router as users_router
from app.routers.projects import router as projects_router

__all__ = [
    "auth_router",
    "users_router",
    "projects_router",
]
