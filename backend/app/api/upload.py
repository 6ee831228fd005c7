"""
Guest upload endpoint for EventDrop.

Anonymous: guests are not account holders. The multipart form carries the
file as ``media`` plus ``projectId`` and ``guestName``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from app.api.deps import get_media_service
from app.schemas.media import MediaEntryResponse
from app.services.media_service import MediaService

router = APIRouter()


@router.post(
    "/upload",
    response_model=MediaEntryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a photo or video as a guest",
    name="upload_media",  # Used for rate limiting category
)
async def upload_media(
    media: Optional[UploadFile] = File(None, description="Image or video file"),
    project_id: str = Form("", alias="projectId"),
    guest_name: str = Form("", alias="guestName"),
    service: MediaService = Depends(get_media_service),
) -> MediaEntryResponse:
    """
    Store one file on the media host and append it to the project.

    Returns 400 for missing fields or an empty file, 404 for an unknown
    project, 413 for an oversized file and 502 if the media host fails.
    """
    entry = await service.upload(project_id, guest_name, media)
    return MediaEntryResponse.model_validate(entry)
