"""
EventDrop Backend API

Main FastAPI application entry point.
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.api import api_router
from app.core.config import get_settings
from app.core.database import async_engine, create_all_tables
from app.core.errors import register_exception_handlers
from app.core.rate_limit import RateLimitMiddleware
from app.core.redis import check_redis_health, close_connection_pool

# Load settings
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("eventdrop")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        logger.info("Creating missing database tables")
        await create_all_tables()
    yield
    close_connection_pool()
    await async_engine.dispose()


app = FastAPI(
    title="EventDrop API",
    description="Event media collection backend: photographers create projects, guests upload photos and videos",
    version=settings.version,
    lifespan=lifespan,
)

register_exception_handlers(app, debug=settings.debug)


def body_too_large_detail(max_size: int) -> dict:
    return {
        "error": "request_entity_too_large",
        "message": f"Request body too large. Maximum size: {max_size} bytes ({max_size // (1024 * 1024)}MB)",
        "details": {"max_size_bytes": max_size},
    }


class RequestBodyLimitMiddleware:
    """
    Enforce MAX_UPLOAD_SIZE (default 100MB) on request bodies.

    A declared Content-Length over the limit is rejected before the body is
    read. Bodies without a length (chunked) are counted as they arrive and
    the request is aborted with 413 once the limit is passed, so an oversized
    upload is never spooled to disk in full.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        max_size = settings.max_upload_size
        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > max_size:
            response = JSONResponse(
                status_code=413,
                content={"detail": body_too_large_detail(max_size)},
            )
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > max_size:
                    raise HTTPException(status_code=413, detail=body_too_large_detail(max_size))
            return message

        await self.app(scope, limited_receive, send)


# Request body size limit
app.add_middleware(RequestBodyLimitMiddleware)

# Rate limiting middleware (keyed by action category, not URL)
app.add_middleware(RateLimitMiddleware)

# CORS configuration (loaded from environment)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[
        "X-RateLimit-Limit",
        "X-RateLimit-Remaining",
        "X-RateLimit-Category",
        "Retry-After",
    ],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint - API info."""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """
    Health check endpoint for Docker/orchestration.

    Checks the health of:
    - Database connection
    - Redis connection (rate limiting)
    """
    checks = {}
    healthy = True

    try:
        async with async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = {"status": "healthy"}
    except Exception as e:
        logger.warning("Database health check failed: %s", e)
        checks["database"] = {"status": "unhealthy", "error": str(e)}
        healthy = False

    redis_status = check_redis_health()
    if redis_status.healthy:
        checks["redis"] = {
            "status": "healthy",
            "latency_ms": redis_status.latency_ms,
        }
    else:
        checks["redis"] = {
            "status": "unhealthy",
            "error": redis_status.error,
        }
        healthy = False

    return {
        "status": "healthy" if healthy else "unhealthy",
        "checks": checks,
        "version": settings.version,
    }
