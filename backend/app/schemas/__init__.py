"""
Pydantic schemas for EventDrop API.
"""

from .auth import (
    AuthResponse,
    UserInfo,
    UserLoginRequest,
    UserRegisterRequest,
)
from .media import MediaEntryResponse, MediaKind
from .project import (
    CompileResponse,
    DeletedProjectResponse,
    LatestProjectResponse,
    ProjectCreate,
    ProjectResponse,
)

__all__ = [
    "AuthResponse",
    "UserInfo",
    "UserLoginRequest",
    "UserRegisterRequest",
    "MediaEntryResponse",
    "MediaKind",
    "CompileResponse",
    "DeletedProjectResponse",
    "LatestProjectResponse",
    "ProjectCreate",
    "ProjectResponse",
]
