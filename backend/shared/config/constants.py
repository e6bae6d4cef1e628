"""
Centralized constants for the backend application.
Avoid magic strings for statuses, variants and document paths.

Usage:
    from shared.config.constants import OrderStatus, PaymentStatus, Variant

    if order.status == OrderStatus.PENDING:
        ...
"""

from enum import Enum
from typing import Final


# =============================================================================
# Entity Status Constants
# =============================================================================


class OrderStatus:
    """Kitchen workflow status of an order."""

    PENDING: Final[str] = "pending"
    PREPARING: Final[str] = "preparing"
    READY: Final[str] = "ready"
    COMPLETED: Final[str] = "completed"

    ALL: Final[tuple[str, ...]] = (PENDING, PREPARING, READY, COMPLETED)


# Advisory kitchen flow: Start, Ready, Complete
KITCHEN_FLOW: Final[dict[str, str]] = {
    OrderStatus.PENDING: OrderStatus.PREPARING,
    OrderStatus.PREPARING: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.COMPLETED,
}


class PaymentStatus:
    """Payment collection status, independent of the kitchen status."""

    PENDING: Final[str] = "pending"
    COMPLETED: Final[str] = "completed"

    ALL: Final[tuple[str, ...]] = (PENDING, COMPLETED)


class Variant(str, Enum):
    """Portion size of an order line."""

    HALF = "half"
    FULL = "full"


class QuickFilter:
    """Quick filters of the order history screen."""

    ALL: Final[str] = "all"
    PENDING: Final[str] = "pending"
    PAID: Final[str] = "paid"
    COMPLETED: Final[str] = "completed"

    CHOICES: Final[tuple[str, ...]] = (ALL, PENDING, PAID, COMPLETED)


# =============================================================================
# Document Paths
# =============================================================================


RESTAURANTS_COLLECTION: Final[str] = "restaurants"
MENU_COLLECTION: Final[str] = "menu"
ORDERS_COLLECTION: Final[str] = "orders"
METADATA_COLLECTION: Final[str] = "metadata"
ORDER_COUNTER_DOC: Final[str] = "orderCounter"


def restaurant_path(restaurant_id: str) -> str:
    return f"{RESTAURANTS_COLLECTION}/{restaurant_id}"


def menu_collection_path(restaurant_id: str) -> str:
    return f"{restaurant_path(restaurant_id)}/{MENU_COLLECTION}"


def orders_collection_path(restaurant_id: str) -> str:
    return f"{restaurant_path(restaurant_id)}/{ORDERS_COLLECTION}"


def order_counter_path(restaurant_id: str) -> str:
    return f"{restaurant_path(restaurant_id)}/{METADATA_COLLECTION}/{ORDER_COUNTER_DOC}"


# =============================================================================
# Realtime Event Types
# =============================================================================


class OrderEvents:
    """Event types published after order writes."""

    CREATED: Final[str] = "ORDER_CREATED"
    STATUS_CHANGED: Final[str] = "ORDER_STATUS_CHANGED"
    PAYMENT_CHANGED: Final[str] = "ORDER_PAYMENT_CHANGED"
    ITEMS_ADDED: Final[str] = "ORDER_ITEMS_ADDED"
    CANCELED: Final[str] = "ORDER_CANCELED"


def orders_channel(restaurant_id: str) -> str:
    """Redis pub/sub channel for a restaurant's order events."""
    return f"restaurant:{restaurant_id}:orders"


def order_counter_key(restaurant_id: str) -> str:
    """Redis key of a restaurant's order number counter."""
    return f"restaurant:{restaurant_id}:order_counter"


# =============================================================================
# Limits
# =============================================================================


class Limits:
    """Input bounds."""

    MAX_NAME_LENGTH: Final[int] = 120
    MAX_CATEGORY_LENGTH: Final[int] = 60
    MAX_TABLE_LENGTH: Final[int] = 20
    MAX_LINE_QUANTITY: Final[int] = 999
