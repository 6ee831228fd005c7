"""
EventDrop services package.

Contains business logic services for the application.
"""

from .auth_service import AuthService
from .compile_service import CompileService
from .media_service import MediaService
from .project_service import ProjectService

__all__ = ["AuthService", "CompileService", "MediaService", "ProjectService"]
