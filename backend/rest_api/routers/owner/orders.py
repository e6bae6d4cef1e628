"""
Order endpoints: placing orders, kitchen workflow, payment, cancellation.

Writes publish an order event from a background task once the response
has been produced.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from shared.config.constants import OrderEvents, QuickFilter
from shared.utils.exceptions import InvalidStatusError
from rest_api.models import Restaurant
from rest_api.routers.owner._base import (
    current_restaurant,
    get_order_service,
    schedule_order_event,
)
from rest_api.routers.schemas import (
    AddItemsRequest,
    CartLineInput,
    OrderOutput,
    PaymentUpdateRequest,
    PlaceOrderRequest,
    StatusUpdateRequest,
)
from rest_api.services.analytics import filter_orders
from rest_api.services.domain import Cart, OrderService


router = APIRouter(tags=["orders"])


def _cart_from(lines: list[CartLineInput]) -> Cart:
    return Cart.from_lines(line.to_domain() for line in lines)


@router.post("/orders", response_model=OrderOutput, status_code=status.HTTP_201_CREATED)
def place_order(
    body: PlaceOrderRequest,
    background_tasks: BackgroundTasks,
    restaurant: Restaurant = Depends(current_restaurant),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    """Commit a cart snapshot as a new pending order."""
    order = service.place_order(_cart_from(body.items), payment=body.payment, table=body.table)
    schedule_order_event(background_tasks, OrderEvents.CREATED, restaurant, order.id, order)
    return OrderOutput.from_domain(order)


@router.get("/orders", response_model=list[OrderOutput])
def list_orders(
    filter: str = Query(default=QuickFilter.ALL),
    search: str | None = Query(default=None, max_length=100),
    service: OrderService = Depends(get_order_service),
) -> list[OrderOutput]:
    """Order history, newest first, with the quick filter and search box applied."""
    if filter not in QuickFilter.CHOICES:
        raise InvalidStatusError("filter", filter, QuickFilter.CHOICES)
    orders = filter_orders(service.list_orders(), filter, search)
    return [OrderOutput.from_domain(order) for order in orders]


@router.get("/orders/{order_id}", response_model=OrderOutput)
def get_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    return OrderOutput.from_domain(service.get_order(order_id))


@router.patch("/orders/{order_id}/status", response_model=OrderOutput)
def set_order_status(
    order_id: str,
    body: StatusUpdateRequest,
    background_tasks: BackgroundTasks,
    restaurant: Restaurant = Depends(current_restaurant),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    order = service.set_status(order_id, body.status)
    schedule_order_event(background_tasks, OrderEvents.STATUS_CHANGED, restaurant, order.id, order)
    return OrderOutput.from_domain(order)


@router.post("/orders/{order_id}/advance", response_model=OrderOutput)
def advance_order(
    order_id: str,
    background_tasks: BackgroundTasks,
    restaurant: Restaurant = Depends(current_restaurant),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    """Start, Ready or Complete, depending on the current status."""
    order = service.advance(order_id)
    schedule_order_event(background_tasks, OrderEvents.STATUS_CHANGED, restaurant, order.id, order)
    return OrderOutput.from_domain(order)


@router.patch("/orders/{order_id}/payment", response_model=OrderOutput)
def set_order_payment(
    order_id: str,
    body: PaymentUpdateRequest,
    background_tasks: BackgroundTasks,
    restaurant: Restaurant = Depends(current_restaurant),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    order = service.set_payment(order_id, body.payment)
    schedule_order_event(background_tasks, OrderEvents.PAYMENT_CHANGED, restaurant, order.id, order)
    return OrderOutput.from_domain(order)


@router.post("/orders/{order_id}/items", response_model=OrderOutput)
def add_order_items(
    order_id: str,
    body: AddItemsRequest,
    background_tasks: BackgroundTasks,
    restaurant: Restaurant = Depends(current_restaurant),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    order = service.add_items(order_id, _cart_from(body.items))
    schedule_order_event(background_tasks, OrderEvents.ITEMS_ADDED, restaurant, order.id, order)
    return OrderOutput.from_domain(order)


@router.delete("/orders/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_order(
    order_id: str,
    background_tasks: BackgroundTasks,
    confirm: bool = False,
    restaurant: Restaurant = Depends(current_restaurant),
    service: OrderService = Depends(get_order_service),
) -> None:
    """Cancel (delete) an order; requires ?confirm=true."""
    service.cancel_order(order_id, confirmed=confirm)
    schedule_order_event(background_tasks, OrderEvents.CANCELED, restaurant, order_id)
