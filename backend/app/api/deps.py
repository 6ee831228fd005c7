"""
Common dependencies for EventDrop API endpoints.

Provides reusable FastAPI dependencies for database sessions,
authentication, configuration and service construction.
"""

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.database import get_async_session
from app.core.media_host import MediaHost, get_media_host
from app.core.security import get_current_user_id
from app.services import AuthService, CompileService, MediaService, ProjectService


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Provides an async database session for route handlers.
    The session is automatically committed on success or
    rolled back on exception.
    """
    async for session in get_async_session():
        yield session


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(db, settings)


def get_project_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    media_host: MediaHost = Depends(get_media_host),
) -> ProjectService:
    return ProjectService(db, settings, media_host)


def get_media_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    media_host: MediaHost = Depends(get_media_host),
) -> MediaService:
    return MediaService(db, settings, media_host)


def get_compile_service(db: AsyncSession = Depends(get_db)) -> CompileService:
    return CompileService(db)


# Re-export commonly used dependencies for convenience
__all__ = [
    "get_db",
    "get_current_user_id",
    "get_auth_service",
    "get_project_service",
    "get_media_service",
    "get_compile_service",
]
