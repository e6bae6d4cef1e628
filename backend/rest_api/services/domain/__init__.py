"""
Domain Services - application layer.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    DocumentStore (data access)

Usage:
    from rest_api.services.domain import MenuService, OrderService

    # In router
    service = MenuService(store, restaurant_id)
    grouped = service.list_grouped_by_category(available_only=True)
"""

from .restaurant_service import RestaurantService
from .menu_service import MenuService, group_by_category, search_items, public_menu
from .cart import Cart
from .order_numbers import (
    OrderNumberSequencer,
    RedisOrderNumberSequencer,
    Sequencer,
    get_sequencer,
)
from .order_service import OrderService, validate_payment, validate_status

__all__ = [
    "RestaurantService",
    "MenuService",
    "group_by_category",
    "search_items",
    "public_menu",
    "Cart",
    "OrderNumberSequencer",
    "RedisOrderNumberSequencer",
    "Sequencer",
    "get_sequencer",
    "OrderService",
    "validate_payment",
    "validate_status",
]
