"""
Shared dependencies for owner routers.

Every owner route resolves the restaurant from the verified token; the
restaurant is created on the owner's first request.
"""

from typing import Any

from fastapi import BackgroundTasks, Depends

from shared.config.logging import get_logger
from shared.infrastructure.events import publish_order_event
from shared.security.auth import current_user_context
from rest_api.models import Order, Restaurant
from rest_api.repositories import DocumentStore, get_document_store
from rest_api.services.domain import (
    MenuService,
    OrderService,
    RestaurantService,
    Sequencer,
    get_sequencer,
)

logger = get_logger(__name__)


def current_restaurant(
    ctx: dict[str, Any] = Depends(current_user_context),
    store: DocumentStore = Depends(get_document_store),
) -> Restaurant:
    return RestaurantService(store).ensure_restaurant(ctx["sub"], ctx.get("email"))


def get_menu_service(
    restaurant: Restaurant = Depends(current_restaurant),
    store: DocumentStore = Depends(get_document_store),
) -> MenuService:
    return MenuService(store, restaurant.id)


def get_order_sequencer(store: DocumentStore = Depends(get_document_store)) -> Sequencer:
    return get_sequencer(store)


def get_order_service(
    restaurant: Restaurant = Depends(current_restaurant),
    store: DocumentStore = Depends(get_document_store),
    sequencer: Sequencer = Depends(get_order_sequencer),
) -> OrderService:
    return OrderService(store, restaurant.id, sequencer)


def schedule_order_event(
    background_tasks: BackgroundTasks,
    event_type: str,
    restaurant: Restaurant,
    order_id: str,
    order: Order | None = None,
) -> None:
    """Publish an order event after the response is sent."""
    entity: dict[str, Any] = {"order_id": order_id}
    if order is not None:
        entity.update(
            order_number=order.order_number,
            status=order.status,
            payment=order.payment,
            total=str(order.total),
        )
    background_tasks.add_task(
        publish_order_event,
        event_type,
        restaurant.id,
        order_id,
        entity,
        restaurant.owner_id,
    )
