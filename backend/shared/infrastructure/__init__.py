"""
Infrastructure module: Database and Redis/events.

Provides:
- Database engine and sessions (db.py)
- Request correlation ids (correlation.py)
- Redis pub/sub for order events (events/)
"""

from shared.infrastructure.db import (
    create_db_engine,
    create_session_factory,
    get_engine,
    get_session_factory,
    safe_commit,
)
from shared.infrastructure.events import (
    get_redis_pool,
    get_redis_sync_client,
    close_redis_pool,
    publish_event,
    publish_order_event,
)

__all__ = [
    # db
    "create_db_engine",
    "create_session_factory",
    "get_engine",
    "get_session_factory",
    "safe_commit",
    # events (Redis)
    "get_redis_pool",
    "get_redis_sync_client",
    "close_redis_pool",
    "publish_event",
    "publish_order_event",
]
