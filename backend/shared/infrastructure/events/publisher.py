"""
Order event publishing with retry.

Publishing is best effort: routers schedule `publish_order_event` as a
background task after the write has been committed, and a failure here is
logged without affecting the response.
"""

from __future__ import annotations

import asyncio
import random
from typing import Any

import redis
import redis.asyncio as redis_async

from shared.config.constants import orders_channel
from shared.config.settings import settings
from shared.config.logging import get_logger
from .event_schema import OrderEvent
from .redis_pool import get_redis_pool

logger = get_logger(__name__)

MAX_EVENT_SIZE = 64 * 1024


def retry_delay(attempt: int, base_delay: float) -> float:
    """Exponential backoff with up to 25% jitter."""
    delay = base_delay * (2 ** attempt)
    return delay + random.uniform(0, delay * 0.25)


async def publish_event(
    redis_client: redis_async.Redis,
    channel: str,
    event: OrderEvent,
) -> int:
    """
    Publish an event to a Redis channel, retrying transient failures.

    Returns:
        Number of subscribers that received the message.

    Raises:
        ValueError: If the serialized event is too large.
        redis.RedisError: If every attempt failed.
    """
    event_json = event.to_json()
    size = len(event_json.encode("utf-8"))
    if size > MAX_EVENT_SIZE:
        raise ValueError(f"Event {event.type} exceeds max size: {size} > {MAX_EVENT_SIZE} bytes")

    attempts = max(1, settings.redis_publish_max_retries)
    for attempt in range(attempts):
        try:
            return await redis_client.publish(channel, event_json)
        except (redis.RedisError, OSError) as e:
            if attempt == attempts - 1:
                logger.error(
                    "Redis publish failed after all retries",
                    channel=channel,
                    event_type=event.type,
                    error=str(e),
                )
                raise
            delay = retry_delay(attempt, settings.redis_publish_retry_delay)
            logger.warning(
                "Redis publish failed, retrying",
                channel=channel,
                event_type=event.type,
                attempt=attempt + 1,
                max_retries=attempts,
                delay_seconds=round(delay, 2),
                error=str(e),
            )
            await asyncio.sleep(delay)
    return 0


async def publish_order_event(
    event_type: str,
    restaurant_id: str,
    order_id: str,
    entity: dict[str, Any] | None = None,
    actor_user_id: str | None = None,
) -> None:
    """
    Publish an order event on the restaurant's channel.

    Does nothing when EVENTS_ENABLED is false. Never raises.
    """
    if not settings.events_enabled:
        return

    try:
        event = OrderEvent(
            type=event_type,
            restaurant_id=restaurant_id,
            order_id=order_id,
            entity=entity or {},
            actor={"user_id": actor_user_id} if actor_user_id else {},
        )
        client = await get_redis_pool()
        await publish_event(client, orders_channel(restaurant_id), event)
    except (redis.RedisError, OSError, ValueError) as e:
        logger.error(
            "Failed to publish order event",
            event_type=event_type,
            order_id=order_id,
            error=str(e),
        )
