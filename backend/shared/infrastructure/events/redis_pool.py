"""
Redis connection pools.

An async client publishes order events; a sync pool serves the Redis
order number counter, which is called from synchronous request handlers.
"""

from __future__ import annotations

import asyncio
import threading

import redis
import redis.asyncio as redis_async

from shared.config.settings import settings, REDIS_URL
from shared.config.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Async pool
# =============================================================================

_redis_pool: redis_async.Redis | None = None
_redis_pool_lock: asyncio.Lock | None = None
_pool_lock_init = threading.Lock()


def _get_pool_lock() -> asyncio.Lock:
    """Lazily create the asyncio lock once, inside a running loop."""
    global _redis_pool_lock
    if _redis_pool_lock is None:
        with _pool_lock_init:
            if _redis_pool_lock is None:
                _redis_pool_lock = asyncio.Lock()
    return _redis_pool_lock


async def get_redis_pool() -> redis_async.Redis:
    """Get or create the async Redis client singleton."""
    global _redis_pool

    if _redis_pool is not None:
        return _redis_pool

    async with _get_pool_lock():
        if _redis_pool is None:
            _redis_pool = redis_async.from_url(
                REDIS_URL,
                max_connections=settings.redis_pool_max_connections,
                decode_responses=True,
                socket_connect_timeout=settings.redis_socket_timeout,
                socket_timeout=settings.redis_socket_timeout,
                health_check_interval=30,
            )
            logger.info(
                "Redis async pool initialized",
                max_connections=settings.redis_pool_max_connections,
                timeout=settings.redis_socket_timeout,
            )
    return _redis_pool


# =============================================================================
# Sync pool
# =============================================================================

_redis_sync_pool: redis.ConnectionPool | None = None
_sync_pool_lock = threading.Lock()


def _get_redis_sync_pool() -> redis.ConnectionPool:
    global _redis_sync_pool
    if _redis_sync_pool is None:
        with _sync_pool_lock:
            if _redis_sync_pool is None:
                _redis_sync_pool = redis.ConnectionPool.from_url(
                    REDIS_URL,
                    max_connections=settings.redis_sync_pool_max_connections,
                    decode_responses=True,
                    socket_connect_timeout=settings.redis_socket_timeout,
                    socket_timeout=settings.redis_socket_timeout,
                    health_check_interval=30,
                )
                logger.info(
                    "Redis sync pool initialized",
                    max_connections=settings.redis_sync_pool_max_connections,
                )
    return _redis_sync_pool


def get_redis_sync_client() -> redis.Redis:
    """A sync client backed by the shared connection pool."""
    return redis.Redis(connection_pool=_get_redis_sync_pool())


# =============================================================================
# Health and cleanup
# =============================================================================


async def check_redis_health() -> bool:
    """PING the async client. Errors are reported as unhealthy."""
    try:
        client = await get_redis_pool()
        return bool(await client.ping())
    except (redis.RedisError, OSError) as e:
        logger.warning("Redis health check failed", error=str(e))
        return False


def close_redis_sync_client() -> None:
    global _redis_sync_pool
    with _sync_pool_lock:
        if _redis_sync_pool is not None:
            try:
                _redis_sync_pool.disconnect()
                logger.info("Redis sync pool closed")
            except redis.RedisError as e:
                logger.warning("Error closing Redis sync pool", error=str(e))
            finally:
                _redis_sync_pool = None


async def close_redis_pool() -> None:
    """Close both pools on application shutdown."""
    global _redis_pool, _redis_pool_lock

    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None
        logger.info("Redis async pool closed")
    _redis_pool_lock = None

    close_redis_sync_client()
