"""
Health check endpoints for the REST API.
Basic liveness plus a detailed check of the document store and Redis.
"""

import asyncio

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from shared.config.settings import settings
from shared.infrastructure.events import get_redis_pool
from shared.utils.health import (
    HealthStatus,
    aggregate_health_checks,
    health_check_with_timeout,
)
from rest_api.repositories import DocumentStore, get_document_store


router = APIRouter(prefix="/api", tags=["health"])


def redis_required() -> bool:
    return settings.events_enabled or settings.order_counter_backend == "redis"


@router.get("/health")
def health_check():
    """Service status without checking dependencies."""
    return {
        "status": "healthy",
        "service": "rest-api",
        "environment": settings.environment,
    }


@health_check_with_timeout(timeout=3.0, component="document_store")
async def check_document_store_health(store: DocumentStore) -> dict:
    await asyncio.to_thread(store.ping)
    return {"backend": type(store).__name__}


@health_check_with_timeout(timeout=3.0, component="redis")
async def check_redis_health() -> None:
    client = await get_redis_pool()
    await client.ping()


@router.get("/health/detailed")
async def detailed_health_check(store: DocumentStore = Depends(get_document_store)):
    """
    Dependency status. Redis is only checked when events or the Redis
    order counter use it.

    Returns 503 if any checked dependency is down.
    """
    checks = [check_document_store_health(store)]
    disabled = []
    if redis_required():
        checks.append(check_redis_health())
    else:
        disabled.append("redis")

    health = await aggregate_health_checks(checks, disabled=disabled)
    body = {
        "service": "rest-api",
        "environment": settings.environment,
        "status": health["status"],
        "dependencies": health["components"],
    }

    if health["status"] != HealthStatus.HEALTHY.value:
        return JSONResponse(content=body, status_code=503)
    return body
