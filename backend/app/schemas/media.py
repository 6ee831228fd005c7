"""
Pydantic schemas for media entries.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

MediaKind = Literal["image", "video"]


class MediaEntryResponse(BaseModel):
    """One guest submission as returned by the API."""

    id: str
    project_id: str
    guest_name: str
    kind: MediaKind
    url: str
    storage_id: str
    original_filename: Optional[str] = None
    content_type: Optional[str] = None
    file_size: int
    uploaded_at: datetime

    model_config = {"from_attributes": True}
