"""
Rate Limiting Middleware

Provides rate limiting keyed by ACTION CATEGORY (not URL path).
Guest uploads are anonymous, so they are limited per client address;
register/login share an "auth" budget to slow down credential guessing.
"""

import logging
from typing import Callable

from fastapi import Request, Response
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Match

from .config import get_settings
from .redis import get_redis_connection

logger = logging.getLogger(__name__)


# Rate limits by category: (requests, window_seconds)
RATE_LIMITS: dict[str, tuple[int, int]] = {
    "upload": (30, 60),      # 30 uploads per minute per guest device
    "auth": (20, 60),        # 20 register/login attempts per minute
    "default": (500, 60),    # 500 requests per minute (allows for polling)
}

# Map route names to rate limit categories
# Route names are defined in FastAPI endpoint decorators: @router.post("/path", name="route_name")
ROUTE_CATEGORIES: dict[str, str] = {
    "upload_media": "upload",
    "register": "auth",
    "login": "auth",
}


def get_rate_limit_category(request: Request) -> str:
    """
    Determine the rate limit category from the route name, not URL path.

    Returns:
        str: Rate limit category name ("upload", "auth" or "default")
    """
    for route in request.app.routes:
        match, _ = route.matches(request.scope)

        if match == Match.FULL:
            route_name = getattr(route, "name", None)

            if route_name and route_name in ROUTE_CATEGORIES:
                return ROUTE_CATEGORIES[route_name]

    return "default"


def get_rate_limit_key(client_id: str, category: str) -> str:
    """
    Generate a Redis key for rate limiting.

    Key format: ratelimit:{client_id}:{category}
    """
    return f"ratelimit:{client_id}:{category}"


def check_rate_limit(client_id: str, category: str) -> tuple[bool, int, int]:
    """
    Check if a request is within rate limits.

    Returns:
        tuple: (is_allowed, current_count, retry_after_seconds)
    """
    limit, window = RATE_LIMITS.get(category, RATE_LIMITS["default"])
    key = get_rate_limit_key(client_id, category)

    redis = get_redis_connection()

    current = redis.get(key)
    current_count = int(current) if current else 0

    if current_count >= limit:
        ttl = redis.ttl(key)
        return False, current_count, max(ttl, 0)

    # Increment counter using pipeline for atomicity
    pipe = redis.pipeline()
    pipe.incr(key)
    pipe.expire(key, window)
    pipe.execute()

    return True, current_count + 1, 0


async def rate_limit_middleware(request: Request, call_next: Callable) -> Response:
    """
    Rate limiting middleware function.

    Checks rate limits based on client address + action category.
    """
    if not get_settings().rate_limit_enabled:
        return await call_next(request)

    client_host = request.client.host if request.client else "unknown"
    client_id = f"anon:{client_host}"

    category = get_rate_limit_category(request)
    try:
        is_allowed, current_count, retry_after = check_rate_limit(client_id, category)
    except RedisError as e:
        # Fail open: an unreachable Redis must not block the API
        logger.warning("Rate limit check skipped for %s on %s: %s", client_id, category, e)
        return await call_next(request)

    limit, window = RATE_LIMITS.get(category, RATE_LIMITS["default"])

    if not is_allowed:
        logger.warning("Rate limit exceeded for %s on %s", client_id, category)
        # Return JSONResponse instead of raising
        # (exceptions raised in BaseHTTPMiddleware don't reach FastAPI handlers)
        return JSONResponse(
            status_code=429,
            content={
                "detail": {
                    "error": "rate_limit_exceeded",
                    "message": f"Rate limit exceeded for {category}",
                    "details": {
                        "category": category,
                        "limit": limit,
                        "window_seconds": window,
                        "retry_after_seconds": retry_after,
                    },
                }
            },
            headers={
                "Retry-After": str(retry_after),
                "X-RateLimit-Limit": str(limit),
                "X-RateLimit-Remaining": "0",
                "X-RateLimit-Reset": str(retry_after),
            },
        )

    response = await call_next(request)

    response.headers["X-RateLimit-Limit"] = str(limit)
    response.headers["X-RateLimit-Remaining"] = str(max(0, limit - current_count))
    response.headers["X-RateLimit-Category"] = category

    return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Rate limiting middleware class for FastAPI.

    Usage:
        app.add_middleware(RateLimitMiddleware)
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        return await rate_limit_middleware(request, call_next)
