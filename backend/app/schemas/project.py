"""
Pydantic schemas for Project endpoints.

Includes request/response models for project CRUD and compile operations.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .media import MediaEntryResponse


class ProjectCreate(BaseModel):
    """Request schema for project creation."""

    name: str = Field(..., max_length=100, description="Project display name")


class ProjectResponse(BaseModel):
    """Full project record including its media entries."""

    id: str
    name: str
    owner_id: str
    guest_url: str
    qr_code: str = Field(..., description="PNG data URL of the guest link")
    media_entries: List[MediaEntryResponse] = Field(default_factory=list)
    media_count: int = 0
    image_count: int = 0
    video_count: int = 0
    final_video: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class LatestProjectResponse(BaseModel):
    """Minimal view of the most recently created project."""

    id: str
    name: str
    created_at: datetime


class DeletedProjectResponse(BaseModel):
    """Identity of a project that was just deleted."""

    id: str
    name: str


class CompileResponse(BaseModel):
    """Acknowledgement returned by the compile endpoint."""

    message: str
    project_id: str
    final_video: str
    media_count: int
