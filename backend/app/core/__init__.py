# Core modules for EventDrop backend
from .config import Settings, get_settings
from .database import Base, get_async_session, async_engine, AsyncSessionLocal
from .errors import (
    AppError,
    AuthError,
    ConflictError,
    FileTooLargeError,
    InternalError,
    NotFoundError,
    UploadError,
    ValidationError,
)
from .media_host import (
    CloudinaryMediaHost,
    MediaHost,
    StoredObject,
    get_media_host,
    media_kind_from_content_type,
    sanitize_filename,
)
from .qr import render_qr_data_url
from .rate_limit import (
    RateLimitMiddleware,
    get_rate_limit_category,
    RATE_LIMITS,
    ROUTE_CATEGORIES,
)
from .redis import (
    get_redis_connection,
    check_redis_health,
    RedisHealthStatus,
)
from .security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_token,
    verify_token,
    get_current_user_id,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Database
    "Base",
    "get_async_session",
    "async_engine",
    "AsyncSessionLocal",
    # Errors
    "AppError",
    "AuthError",
    "ConflictError",
    "FileTooLargeError",
    "InternalError",
    "NotFoundError",
    "UploadError",
    "ValidationError",
    # Media host
    "CloudinaryMediaHost",
    "MediaHost",
    "StoredObject",
    "get_media_host",
    "media_kind_from_content_type",
    "sanitize_filename",
    # QR
    "render_qr_data_url",
    # Rate Limiting
    "RateLimitMiddleware",
    "get_rate_limit_category",
    "RATE_LIMITS",
    "ROUTE_CATEGORIES",
    # Redis
    "get_redis_connection",
    "check_redis_health",
    "RedisHealthStatus",
    # Security
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
    "verify_token",
    "get_current_user_id",
]
