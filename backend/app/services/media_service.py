"""
Media ingestion service for EventDrop.

Guests are anonymous: the only gate on an upload is knowing the project id.
Every check that can fail runs before the file is sent to the media host,
so rejected uploads never leave an object behind.
"""

import logging
import os
from typing import Optional

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.errors import FileTooLargeError, ValidationError
from app.core.media_host import MediaHost, media_kind_from_content_type, sanitize_filename
from app.models.media import MediaEntry
from app.models.project import Project

from .project_service import project_not_found

logger = logging.getLogger(__name__)

# Column sizes in app.models.media
MAX_GUEST_NAME_LENGTH = 100
MAX_CONTENT_TYPE_LENGTH = 100


def measure_upload(file: UploadFile) -> int:
    """Return the size in bytes of an uploaded file, leaving it rewound."""
    fileobj = file.file
    fileobj.seek(0, os.SEEK_END)
    size = fileobj.tell()
    fileobj.seek(0)
    return size


class MediaService:
    """Stores guest uploads and appends them to their project."""

    def __init__(self, db: AsyncSession, settings: Settings, media_host: MediaHost):
        self.db = db
        self.settings = settings
        self.media_host = media_host

    async def upload(
        self,
        project_id: str,
        guest_name: str,
        file: Optional[UploadFile],
    ) -> MediaEntry:
        """
        Store one guest file and append it to the project.

        Raises:
            ValidationError: If the file, project id or guest name is missing,
                the file is empty, or the guest name or content type is too long
            FileTooLargeError: If the file exceeds MAX_UPLOAD_SIZE
            NotFoundError: If the project does not exist
            UploadError: If the media host fails
        """
        project_id = (project_id or "").strip()
        guest_name = (guest_name or "").strip()

        if file is None or not file.filename:
            raise ValidationError("No file attached", details={"field": "media"})
        missing = [
            field
            for field, value in (("projectId", project_id), ("guestName", guest_name))
            if not value
        ]
        if missing:
            raise ValidationError(
                "Project id and guest name are required",
                details={"fields": missing},
            )
        if len(guest_name) > MAX_GUEST_NAME_LENGTH:
            raise ValidationError(
                f"Guest name must be at most {MAX_GUEST_NAME_LENGTH} characters",
                details={"field": "guestName", "max_length": MAX_GUEST_NAME_LENGTH},
            )
        if file.content_type and len(file.content_type) > MAX_CONTENT_TYPE_LENGTH:
            raise ValidationError(
                "Unsupported content type",
                details={"field": "media", "max_length": MAX_CONTENT_TYPE_LENGTH},
            )

        file_size = measure_upload(file)
        max_size = self.settings.max_upload_size
        if file_size > max_size:
            raise FileTooLargeError(
                f"File too large: {file_size / (1024 * 1024):.1f}MB. "
                f"Maximum: {max_size / (1024 * 1024):.0f}MB",
                details={"file_size": file_size, "max_size_bytes": max_size},
            )
        if file_size == 0:
            raise ValidationError("File is empty", details={"field": "media"})

        result = await self.db.execute(select(Project.id).where(Project.id == project_id))
        if result.scalar_one_or_none() is None:
            raise project_not_found(project_id)

        filename = sanitize_filename(file.filename)
        kind = media_kind_from_content_type(file.content_type)

        stored = await self.media_host.upload(
            file.file,
            folder=project_id,
            filename=filename,
            content_type=file.content_type,
        )

        # A single INSERT per upload: concurrent guests never overwrite each other.
        entry = MediaEntry(
            project_id=project_id,
            guest_name=guest_name,
            kind=kind,
            url=stored.url,
            storage_id=stored.storage_id,
            storage_resource_type=stored.resource_type,
            original_filename=filename,
            content_type=file.content_type,
            file_size=file_size,
        )
        self.db.add(entry)
        try:
            await self.db.commit()
        except IntegrityError:
            # The project was deleted while the file was being stored
            await self.db.rollback()
            logger.warning("Project %s vanished during upload, removing %s", project_id, stored.storage_id)
            await self._discard(stored.storage_id, stored.resource_type)
            raise project_not_found(project_id)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Could not record upload %s for project %s", stored.storage_id, project_id)
            await self._discard(stored.storage_id, stored.resource_type)
            raise
        await self.db.refresh(entry)

        logger.info(
            "Stored %s from guest %r in project %s (%d bytes)",
            kind, guest_name, project_id, file_size,
        )
        return entry

    async def _discard(self, storage_id: str, resource_type: str) -> None:
        """Remove an object that was stored but never recorded."""
        try:
            await self.media_host.delete(storage_id, resource_type)
        except Exception:
            logger.exception("Could not delete orphaned upload %s", storage_id)
