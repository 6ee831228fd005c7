"""
MediaEntry model for EventDrop.

One guest submission (image or video) stored on the external media host.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
import uuid

from sqlalchemy import BigInteger, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from .project import Project


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class MediaEntry(Base):
    """
    MediaEntry model representing one uploaded file.

    Rows are inserted once and never updated. ``kind`` is fixed at
    ingestion from the declared content type.
    """

    __tablename__ = "media_entries"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
        doc="UUID primary key"
    )
    project_id: Mapped[str] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Foreign key to parent project"
    )
    guest_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        doc="Display name the guest entered"
    )
    kind: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        index=True,
        doc="Media kind: image or video"
    )

    # Media host reference
    url: Mapped[str] = mapped_column(
        String(1000),
        nullable=False,
        doc="Public URL on the media host"
    )
    storage_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Media host identifier used for deletion"
    )
    storage_resource_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="image",
        doc="Media host resource class (image, video, raw)"
    )

    # File information
    original_filename: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Sanitized client filename"
    )
    content_type: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        doc="Declared MIME type"
    )
    file_size: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
        doc="File size in bytes"
    )

    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        doc="Upload timestamp"
    )

    # Relationships
    project: Mapped["Project"] = relationship(
        "Project",
        back_populates="media_entries"
    )

    def __repr__(self) -> str:
        return f"<MediaEntry(id={self.id!r}, kind={self.kind!r}, guest_name={self.guest_name!r})>"
