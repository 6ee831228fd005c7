"""
Application Configuration

Settings class using pydantic-settings for environment variable loading.
Defines resource limits, external service credentials and application configuration.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For example, MAX_UPLOAD_SIZE can be set via MAX_UPLOAD_SIZE env var.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="EventDrop API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="0.1.0", description="API version")
    log_level: str = Field(default="INFO", description="Root log level")

    # Security
    secret_key: str = Field(
        default="change-me-in-production-min-32-chars",
        description="Secret key for JWT signing (min 32 characters)",
    )
    access_token_expire_hours: int = Field(
        default=24,
        description="Access token expiration time in hours",
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./eventdrop.db",
        description="Database connection URL",
    )
    auto_create_tables: bool = Field(
        default=False,
        description="Create missing tables at startup (local development only)",
    )

    # Redis (rate limiting)
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable the Redis-backed rate limiting middleware",
    )

    # Guest links
    frontend_origin: str = Field(
        default="http://localhost:3000",
        description="Origin of the browser client; guest links point here",
    )

    # Resource Limits
    max_upload_size: int = Field(
        default=100 * 1024 * 1024,  # 100MB
        description="Maximum upload file size in bytes (default: 100MB)",
    )

    # Media host (Cloudinary)
    cloudinary_cloud_name: str = Field(default="", description="Cloudinary cloud name")
    cloudinary_api_key: str = Field(default="", description="Cloudinary API key")
    cloudinary_api_secret: str = Field(default="", description="Cloudinary API secret")
    cloudinary_folder: str = Field(
        default="eventdrop",
        description="Root folder for uploaded objects on the media host",
    )
    storage_timeout_seconds: float = Field(
        default=60,
        gt=0,
        description="Timeout for a single media host call in seconds",
    )
    storage_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts per media host call before giving up",
    )
    storage_retry_backoff_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Linear backoff between media host attempts",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def guest_url(self, project_id: str) -> str:
        """Build the guest-facing upload link for a project."""
        return f"{self.frontend_origin.rstrip('/')}/guest/{project_id}"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Uses lru_cache to ensure settings are only loaded once per process.
    Also used as a FastAPI dependency so tests can override it.

    Example:
        >>> settings = get_settings()
        >>> print(settings.max_upload_size)
        104857600
    """
    return Settings()
