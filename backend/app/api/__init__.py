"""
EventDrop API routes package.

Contains all API endpoint routers for the application.
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .projects import router as projects_router
from .upload import router as upload_router

# Main API router that includes all sub-routers
api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(projects_router, prefix="/projects", tags=["projects"])
api_router.include_router(upload_router, tags=["upload"])

__all__ = [
    "api_router",
    "auth_router",
    "projects_router",
    "upload_router",
]
