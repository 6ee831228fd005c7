"""
Project service for EventDrop.

Creates, lists, reads and deletes projects. Listing and deletion are
scoped to the authenticated owner; reading a single project is public so
guests holding the link can load it.
"""

import logging
import uuid
from typing import List, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import Settings
from app.core.errors import NotFoundError, ValidationError
from app.core.media_host import MediaHost
from app.core.qr import render_qr_data_url
from app.models.project import Project

logger = logging.getLogger(__name__)


def project_not_found(project_id: str) -> NotFoundError:
    return NotFoundError(
        "Project not found",
        details={"resource_type": "project", "resource_id": project_id},
    )


async def get_owned_project(
    db: AsyncSession,
    project_id: str,
    owner_id: str,
    load_media: bool = False,
) -> Project:
    """
    Get a project by ID, verifying ownership.

    Raises:
        NotFoundError: If the project does not exist or belongs to someone else
    """
    query = select(Project).where(Project.id == project_id, Project.owner_id == owner_id)
    if load_media:
        query = query.options(selectinload(Project.media_entries))

    result = await db.execute(query)
    project = result.scalar_one_or_none()
    if project is None:
        raise project_not_found(project_id)
    return project


class ProjectService:
    """Project lifecycle operations."""

    def __init__(self, db: AsyncSession, settings: Settings, media_host: MediaHost):
        self.db = db
        self.settings = settings
        self.media_host = media_host

    async def create_project(self, owner_id: str, name: str) -> Project:
        """
        Create an empty project with its guest link QR code.

        Raises:
            ValidationError: If the name is blank
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Project name is required", details={"field": "name"})

        project_id = str(uuid.uuid4())
        project = Project(
            id=project_id,
            owner_id=owner_id,
            name=name,
            qr_code=render_qr_data_url(self.settings.guest_url(project_id)),
            media_entries=[],
        )
        self.db.add(project)
        await self.db.commit()

        logger.info("Created project %s for user %s", project_id, owner_id)
        return await self.get_project(project_id)

    async def list_projects(self, owner_id: str) -> List[Project]:
        """Return the owner's projects, newest first."""
        result = await self.db.execute(
            select(Project)
            .where(Project.owner_id == owner_id)
            .options(selectinload(Project.media_entries))
            .order_by(Project.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_project(self, project_id: str) -> Project:
        """
        Get any project by id, with its media entries.

        Raises:
            NotFoundError: If no project has that id
        """
        result = await self.db.execute(
            select(Project)
            .where(Project.id == project_id)
            .options(selectinload(Project.media_entries))
            .execution_options(populate_existing=True)
        )
        project = result.scalar_one_or_none()
        if project is None:
            raise project_not_found(project_id)
        return project

    async def get_latest_project(self) -> Project:
        """
        Return the most recently created project of any owner.

        This is not owner-scoped: the guest "join latest event" shortcut
        relies on it.

        Raises:
            NotFoundError: If there are no projects at all
        """
        result = await self.db.execute(
            select(Project).order_by(Project.created_at.desc()).limit(1)
        )
        project = result.scalar_one_or_none()
        if project is None:
            raise NotFoundError("No projects yet", details={"resource_type": "project"})
        return project

    async def delete_project(self, project_id: str, owner_id: str) -> Tuple[str, str]:
        """
        Delete an owned project, then remove its files from the media host.

        The database delete is authoritative. Media host failures during
        cleanup are logged and never reported to the caller, so objects may
        be orphaned on the host.

        Returns:
            (id, name) of the deleted project

        Raises:
            NotFoundError: If the project does not exist or is not owned by the caller
        """
        project = await get_owned_project(self.db, project_id, owner_id, load_media=True)
        stored = [(m.storage_id, m.storage_resource_type) for m in project.media_entries]
        deleted = (project.id, project.name)

        await self.db.delete(project)
        await self.db.commit()
        logger.info("Deleted project %s (%d media entries)", project_id, len(stored))

        for storage_id, resource_type in stored:
            try:
                await self.media_host.delete(storage_id, resource_type)
            except Exception:
                logger.exception(
                    "Could not delete %s from media host for project %s", storage_id, project_id
                )

        return deleted
