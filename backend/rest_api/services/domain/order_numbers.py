"""
Order Number Sequencer.

Human-facing order numbers: 1 on a restaurant's first order, then
consecutive integers. Every number comes from a single atomic increment;
two concurrent orders can never receive the same number.
"""

from __future__ import annotations

import threading
from typing import Protocol

import redis

from shared.config.constants import order_counter_key, order_counter_path
from shared.config.logging import get_logger, mask_user_id
from shared.config.settings import settings
from shared.infrastructure.events import get_redis_sync_client
from shared.utils.exceptions import BackendUnavailableError
from rest_api.repositories import DocumentStore

logger = get_logger(__name__)

COUNTER_FIELD = "current"


class Sequencer(Protocol):
    def next_order_number(self, restaurant_id: str) -> int: ...


class OrderNumberSequencer:
    """Counter kept in the document store at restaurants/{rid}/metadata/orderCounter."""

    def __init__(self, store: DocumentStore):
        self._store = store

    def next_order_number(self, restaurant_id: str) -> int:
        number = self._store.increment_counter(order_counter_path(restaurant_id), COUNTER_FIELD)
        logger.debug(
            "Order number issued",
            restaurant_id=mask_user_id(restaurant_id),
            order_number=number,
        )
        return number

    def current(self, restaurant_id: str) -> int:
        """Last issued number, 0 before the first order."""
        data = self._store.get_document(order_counter_path(restaurant_id)) or {}
        return int(data.get(COUNTER_FIELD, 0))


class RedisOrderNumberSequencer:
    """
    Counter kept in Redis and incremented with INCR.

    Each issued value advances the store's counter as well, so the store
    sequencer continues after it. A Redis key that does not exist yet is
    seeded from the counter document. Switching backends in either
    direction never reissues a number.
    """

    def __init__(self, store: DocumentStore, client: redis.Redis | None = None):
        self._store = store
        self._client = client if client is not None else get_redis_sync_client()
        self._seeded: set[str] = set()
        self._seed_lock = threading.Lock()

    def _seed(self, restaurant_id: str) -> None:
        with self._seed_lock:
            if restaurant_id in self._seeded:
                return
            data = self._store.get_document(order_counter_path(restaurant_id)) or {}
            # NX: never lowers a counter another process already advanced
            self._client.set(order_counter_key(restaurant_id), int(data.get(COUNTER_FIELD, 0)), nx=True)
            self._seeded.add(restaurant_id)

    def next_order_number(self, restaurant_id: str) -> int:
        try:
            self._seed(restaurant_id)
            number = int(self._client.incr(order_counter_key(restaurant_id)))
        except (redis.RedisError, OSError) as e:
            raise BackendUnavailableError(
                "redis", operation="next_order_number", error=str(e)
            ) from e

        self._store.advance_counter(order_counter_path(restaurant_id), COUNTER_FIELD, number)
        logger.debug(
            "Order number issued",
            restaurant_id=mask_user_id(restaurant_id),
            order_number=number,
            backend="redis",
        )
        return number


def get_sequencer(store: DocumentStore) -> Sequencer:
    """Sequencer for the configured ORDER_COUNTER_BACKEND."""
    if settings.order_counter_backend == "redis":
        return RedisOrderNumberSequencer(store)
    return OrderNumberSequencer(store)
