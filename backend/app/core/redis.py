"""
Redis Connection Management

Provides Redis connection pool/client with:
- Connection from the configured REDIS_URL
- Connection health check functionality
- Connection pooling for efficient resource usage
"""

import time
from dataclasses import dataclass
from typing import Optional

from redis import ConnectionPool, Redis
from redis.exceptions import ConnectionError, TimeoutError

from .config import get_settings

# Module-level connection pool singleton
_connection_pool: Optional[ConnectionPool] = None


def get_connection_pool() -> ConnectionPool:
    """Get or create the Redis connection pool singleton."""
    global _connection_pool

    if _connection_pool is None:
        _connection_pool = ConnectionPool.from_url(
            get_settings().redis_url,
            max_connections=10,
            decode_responses=True,  # Return strings instead of bytes
        )

    return _connection_pool


def get_redis_connection() -> Redis:
    """
    Get a Redis connection from the connection pool.

    Example:
        >>> redis = get_redis_connection()
        >>> redis.set("key", "value")
        >>> redis.get("key")
        'value'
    """
    return Redis(connection_pool=get_connection_pool())


@dataclass
class RedisHealthStatus:
    """Health status for Redis connection."""
    healthy: bool
    latency_ms: Optional[float] = None
    error: Optional[str] = None


def check_redis_health(timeout: float = 5.0) -> RedisHealthStatus:
    """
    Check the health of the Redis connection.

    Performs a PING command and measures latency.
    """
    try:
        client = Redis.from_url(
            get_settings().redis_url,
            socket_timeout=timeout,
            socket_connect_timeout=timeout,
            decode_responses=True,
        )

        start = time.perf_counter()
        pong = client.ping()
        latency_ms = (time.perf_counter() - start) * 1000

        if not pong:
            return RedisHealthStatus(healthy=False, error="PING returned False")

        return RedisHealthStatus(healthy=True, latency_ms=round(latency_ms, 2))

    except ConnectionError as e:
        return RedisHealthStatus(healthy=False, error=f"Connection failed: {str(e)}")
    except TimeoutError as e:
        return RedisHealthStatus(healthy=False, error=f"Connection timeout: {str(e)}")


def close_connection_pool() -> None:
    """Close and reset the connection pool (used at shutdown)."""
    global _connection_pool

    if _connection_pool is not None:
        _connection_pool.disconnect()
        _connection_pool = None
