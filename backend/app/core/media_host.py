"""
External Media Host

Uploaded guest files are not kept on local disk; they are pushed to a
hosted media service that returns a public URL and an opaque storage id.

Provides:
- Filename sanitization for the metadata we keep about each upload
- Media kind derivation from the declared content type
- ``MediaHost`` interface and its Cloudinary implementation, with
  per-call timeout and retries
"""

import abc
import asyncio
import logging
import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import BinaryIO, Callable, Optional, TypeVar
from uuid import uuid4

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from fastapi.concurrency import run_in_threadpool

from .config import Settings, get_settings
from .errors import UploadError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Including the dot
MAX_EXTENSION_LENGTH = 16

# Cloudinary errors that will not go away on retry
NON_RETRYABLE_ERRORS = (
    cloudinary.exceptions.BadRequest,
    cloudinary.exceptions.AuthorizationRequired,
    cloudinary.exceptions.NotAllowed,
)


def sanitize_filename(filename: str) -> str:
    """
    Sanitize a client-supplied filename before it is stored as metadata.

    - Strips directory components (basename only)
    - Removes null bytes and control characters
    - Removes characters that are problematic on various filesystems
    - Limits the name to 100 characters and the extension to 16

    Example:
        >>> sanitize_filename("../../../etc/passwd")
        'passwd'
        >>> sanitize_filename("my<file>name.mp4")
        'myfilename.mp4'
    """
    # Browsers on Windows may send the full client path
    filename = filename.replace("\\", "/")
    filename = os.path.basename(filename)

    filename = filename.replace("\x00", "")
    filename = re.sub(r'[<>:"/\\|?*\x00-\x1f]', "", filename)

    name, ext = os.path.splitext(filename)
    name = name.strip(". ")
    name = name[:100]
    ext = ext[:MAX_EXTENSION_LENGTH]

    if not name:
        name = uuid4().hex[:8]

    return f"{name}{ext}"


def media_kind_from_content_type(content_type: Optional[str]) -> str:
    """
    Classify an upload as ``image`` or ``video``.

    Anything whose declared type is not ``image/*`` (including a missing
    type) is treated as video.

    Example:
        >>> media_kind_from_content_type("image/jpeg")
        'image'
        >>> media_kind_from_content_type("video/mp4")
        'video'
        >>> media_kind_from_content_type(None)
        'video'
    """
    if content_type and content_type.lower().startswith("image/"):
        return "image"
    return "video"


@dataclass(frozen=True)
class StoredObject:
    """What the media host tells us about a stored upload."""

    url: str
    storage_id: str
    resource_type: str


class MediaHost(abc.ABC):
    """Interface for the external service that stores uploaded media."""

    @abc.abstractmethod
    async def upload(
        self,
        fileobj: BinaryIO,
        *,
        folder: str,
        filename: str,
        content_type: Optional[str],
    ) -> StoredObject:
        """
        Store ``fileobj`` and return its URL and storage id.

        Raises:
            UploadError: If the host fails or times out
        """

    @abc.abstractmethod
    async def delete(self, storage_id: str, resource_type: str) -> None:
        """
        Delete a previously stored object.

        Raises:
            UploadError: If the host fails or times out
        """


class CloudinaryMediaHost(MediaHost):
    """
    Media host backed by Cloudinary.

    The SDK is blocking, so every call runs in the threadpool and is
    bounded by ``storage_timeout_seconds``. Transient SDK failures are
    retried up to ``storage_max_attempts`` times with linear backoff; a
    timeout fails the call immediately.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        cloudinary.config(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            secure=True,
        )

    async def upload(
        self,
        fileobj: BinaryIO,
        *,
        folder: str,
        filename: str,
        content_type: Optional[str],
    ) -> StoredObject:
        def _upload() -> dict:
            fileobj.seek(0)
            return cloudinary.uploader.upload(
                fileobj,
                folder=f"{self.settings.cloudinary_folder}/{folder}",
                resource_type="auto",
                filename=filename,
                overwrite=False,
                timeout=self.settings.storage_timeout_seconds,
            )

        result = await self._call_with_retries("upload", _upload)
        return StoredObject(
            url=result["secure_url"],
            storage_id=result["public_id"],
            resource_type=result.get("resource_type", "image"),
        )

    async def delete(self, storage_id: str, resource_type: str) -> None:
        def _destroy() -> dict:
            return cloudinary.uploader.destroy(
                storage_id,
                resource_type=resource_type,
                invalidate=True,
                timeout=self.settings.storage_timeout_seconds,
            )

        result = await self._call_with_retries("delete", _destroy)
        outcome = (result or {}).get("result")
        if outcome not in ("ok", "not found"):
            raise UploadError(
                f"Media host refused to delete {storage_id}",
                details={"result": outcome},
            )

    async def _call_with_retries(self, action: str, func: Callable[[], T]) -> T:
        attempts = self.settings.storage_max_attempts
        last_error: Optional[BaseException] = None

        for attempt in range(1, attempts + 1):
            try:
                return await asyncio.wait_for(
                    run_in_threadpool(func),
                    timeout=self.settings.storage_timeout_seconds,
                )
            except asyncio.TimeoutError as e:
                # The abandoned call keeps running in its thread and may still
                # reach the host, so it is never retried.
                logger.error(
                    "Media host %s timed out after %ss (attempt %d/%d)",
                    action, self.settings.storage_timeout_seconds, attempt, attempts,
                )
                raise UploadError(
                    f"Media host {action} timed out",
                    details={"timeout_seconds": self.settings.storage_timeout_seconds},
                ) from e
            except NON_RETRYABLE_ERRORS as e:
                logger.error("Media host rejected %s: %s", action, e)
                raise UploadError(f"Media host rejected the {action}") from e
            except Exception as e:
                last_error = e
                logger.warning(
                    "Media host %s failed (attempt %d/%d): %s", action, attempt, attempts, e
                )

            if attempt < attempts:
                await asyncio.sleep(self.settings.storage_retry_backoff_seconds * attempt)

        raise UploadError(f"Media host {action} failed after {attempts} attempts") from last_error


@lru_cache()
def _default_media_host() -> MediaHost:
    return CloudinaryMediaHost(get_settings())


def get_media_host() -> MediaHost:
    """
    FastAPI dependency returning the process-wide media host.

    Tests override this dependency with an in-memory fake.
    """
    return _default_media_host()
