"""
Order events over Redis pub/sub.

- event_schema.py: OrderEvent dataclass with validation
- redis_pool.py: async and sync connection pools
- publisher.py: publish with retry, best-effort order event publishing
"""

from .event_schema import OrderEvent
from .redis_pool import (
    get_redis_pool,
    get_redis_sync_client,
    check_redis_health,
    close_redis_pool,
    close_redis_sync_client,
)
from .publisher import publish_event, publish_order_event, retry_delay, MAX_EVENT_SIZE

__all__ = [
    "OrderEvent",
    "get_redis_pool",
    "get_redis_sync_client",
    "check_redis_health",
    "close_redis_pool",
    "close_redis_sync_client",
    "publish_event",
    "publish_order_event",
    "retry_delay",
    "MAX_EVENT_SIZE",
]
