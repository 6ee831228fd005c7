"""
SQLAlchemy models for EventDrop.

This module exports all database models for convenient importing:

    from app.models import User, Project, MediaEntry

All models use UUID strings as primary keys.
"""

from .user import User
from .project import Project
from .media import MediaEntry

__all__ = [
    "User",
    "Project",
    "MediaEntry",
]
