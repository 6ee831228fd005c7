"""
Project endpoints for EventDrop.

Owner-scoped endpoints require a bearer token. Reading a single project and
the "latest project" shortcut are public so guests can use them.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from app.api.deps import get_compile_service, get_current_user_id, get_project_service
from app.core.config import Settings, get_settings
from app.models.project import Project
from app.schemas.media import MediaEntryResponse
from app.schemas.project import (
    CompileResponse,
    DeletedProjectResponse,
    LatestProjectResponse,
    ProjectCreate,
    ProjectResponse,
)
from app.services.compile_service import CompileService
from app.services.project_service import ProjectService

router = APIRouter()


# =============================================================================
# Helper Functions
# =============================================================================


def project_to_response(project: Project, settings: Settings) -> ProjectResponse:
    """Convert a Project (with media loaded) to its API representation."""
    media = [MediaEntryResponse.model_validate(entry) for entry in project.media_entries]
    image_count = sum(1 for entry in media if entry.kind == "image")

    return ProjectResponse(
        id=project.id,
        name=project.name,
        owner_id=project.owner_id,
        guest_url=settings.guest_url(project.id),
        qr_code=project.qr_code,
        media_entries=media,
        media_count=len(media),
        image_count=image_count,
        video_count=len(media) - image_count,
        final_video=project.final_video,
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new project",
)
async def create_project(
    data: ProjectCreate,
    user_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
    settings: Settings = Depends(get_settings),
) -> ProjectResponse:
    """Create a project and its guest QR code for the current user."""
    project = await service.create_project(user_id, data.name)
    return project_to_response(project, settings)


@router.get(
    "",
    response_model=List[ProjectResponse],
    summary="List my projects",
    description="All projects of the authenticated user, newest first.",
)
async def list_projects(
    user_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
    settings: Settings = Depends(get_settings),
) -> List[ProjectResponse]:
    projects = await service.list_projects(user_id)
    return [project_to_response(project, settings) for project in projects]


# Declared before "/{project_id}" so "latest" is not taken for an id
@router.get(
    "/latest",
    response_model=LatestProjectResponse,
    summary="Most recently created project",
    description="Newest project across all owners. Used by the guest 'join latest event' shortcut.",
)
async def get_latest_project(
    service: ProjectService = Depends(get_project_service),
) -> LatestProjectResponse:
    project = await service.get_latest_project()
    return LatestProjectResponse(id=project.id, name=project.name, created_at=project.created_at)


@router.get(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Get project details",
    description="Public: anyone holding the project id can read it.",
)
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
    settings: Settings = Depends(get_settings),
) -> ProjectResponse:
    project = await service.get_project(project_id)
    return project_to_response(project, settings)


@router.delete(
    "/{project_id}",
    response_model=DeletedProjectResponse,
    summary="Delete project",
    description="Delete an owned project and remove its media from the media host.",
)
async def delete_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
) -> DeletedProjectResponse:
    deleted_id, name = await service.delete_project(project_id, user_id)
    return DeletedProjectResponse(id=deleted_id, name=name)


@router.post(
    "/{project_id}/compile",
    response_model=CompileResponse,
    summary="Compile final video",
    name="compile_project",
)
async def compile_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    service: CompileService = Depends(get_compile_service),
) -> CompileResponse:
    """Record the final video reference for a project that has media."""
    return await service.compile_project(project_id, user_id)
