"""
Video compilation service for EventDrop.

Compilation is a placeholder: it records where the final video would live
and acknowledges the request. No media is transcoded.
"""

import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ValidationError
from app.models.media import MediaEntry
from app.schemas.project import CompileResponse

from .project_service import get_owned_project

logger = logging.getLogger(__name__)


def final_video_path(project_id: str) -> str:
    return f"{project_id}/compiled.mp4"


class CompileService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def compile_project(self, project_id: str, owner_id: str) -> CompileResponse:
        """
        Mark an owned project as having a final video.

        Raises:
            NotFoundError: If the project does not exist or is not owned by the caller
            ValidationError: If the project has no media entries yet
        """
        project = await get_owned_project(self.db, project_id, owner_id)

        result = await self.db.execute(
            select(func.count(MediaEntry.id)).where(MediaEntry.project_id == project_id)
        )
        media_count = result.scalar() or 0
        if media_count == 0:
            raise ValidationError(
                "Project has no media to compile",
                details={"project_id": project_id},
            )

        project.final_video = final_video_path(project_id)
        project.updated_at = datetime.utcnow()
        await self.db.commit()

        logger.info("Compile requested for project %s (%d media entries)", project_id, media_count)
        return CompileResponse(
            message="Video compilation started",
            project_id=project_id,
            final_video=project.final_video,
            media_count=media_count,
        )
