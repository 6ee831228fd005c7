"""
Project model for EventDrop.

A project is the collection point for one event's guest uploads.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional
import uuid

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from .media import MediaEntry
    from .user import User


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class Project(Base):
    """
    Project model representing one event.

    The id is generated by the application and is what guests see in their
    upload link. Media entries hang off the project and are only ever
    appended; they disappear together with the project.
    """

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
        doc="Opaque public project id (UUID4)"
    )
    owner_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Foreign key to owning user"
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        doc="Project display name"
    )
    qr_code: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        doc="PNG data URL encoding the guest upload link"
    )
    final_video: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
        doc="Reference to the compiled video, set by compile"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True,
        doc="Project creation timestamp"
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        onupdate=datetime.utcnow,
        nullable=True,
        doc="Last update timestamp"
    )

    # Relationships
    owner: Mapped["User"] = relationship(
        "User",
        back_populates="projects"
    )
    media_entries: Mapped[List["MediaEntry"]] = relationship(
        "MediaEntry",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="MediaEntry.uploaded_at"
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id!r}, name={self.name!r})>"
