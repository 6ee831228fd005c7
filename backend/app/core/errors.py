"""
Error taxonomy for EventDrop.

Services raise these exceptions; the handlers registered by
``register_exception_handlers`` turn them into the JSON envelope used by
every endpoint:

    {"detail": {"error": "<code>", "message": "<text>", "details": {...}}}
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map to a user-facing HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[dict] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_detail(self) -> dict[str, Any]:
        detail: dict[str, Any] = {"error": self.error, "message": self.message}
        if self.details:
            detail["details"] = self.details
        return detail

    @property
    def headers(self) -> Optional[dict[str, str]]:
        return None


class ValidationError(AppError):
    """A required field is missing or blank, or a value is out of bounds."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "validation_error"
    default_message = "Invalid request"


class FileTooLargeError(ValidationError):
    status_code = 413
    error = "request_entity_too_large"
    default_message = "File too large"


class ConflictError(AppError):
    """A unique key already exists (e.g. a registered email)."""

    # Duplicates are reported as 400, like every other rejected registration.
    status_code = status.HTTP_400_BAD_REQUEST
    error = "conflict"
    default_message = "Resource already exists"


class AuthError(AppError):
    """Bad credentials, or a missing/invalid/expired token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "unauthorized"
    default_message = "Invalid or expired token"

    @property
    def headers(self) -> Optional[dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class NotFoundError(AppError):
    """
    Unknown id, or an id the caller does not own.

    Both cases produce the same response.
    """

    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"
    default_message = "Resource not found"


class UploadError(AppError):
    """The external media host failed or timed out."""

    status_code = status.HTTP_502_BAD_GATEWAY
    error = "upload_failed"
    default_message = "Could not store the uploaded file"


class InternalError(AppError):
    pass


# =============================================================================
# Handlers
# =============================================================================


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.to_detail()},
        headers=exc.headers,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed or missing request fields as 400 validation errors."""
    fields = [
        ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": {
                "error": "validation_error",
                "message": "Missing or invalid fields",
                "details": {"fields": fields},
            }
        },
    )


def make_unhandled_error_handler(debug: bool):
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        error = InternalError(str(exc) if debug else None)
        return JSONResponse(
            status_code=error.status_code,
            content={"detail": error.to_detail()},
        )

    return unhandled_error_handler


def register_exception_handlers(app: FastAPI, debug: bool = False) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, make_unhandled_error_handler(debug))
