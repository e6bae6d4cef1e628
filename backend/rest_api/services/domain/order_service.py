"""
Order Lifecycle Domain Service.

Kitchen status moves pending -> preparing -> ready -> completed; the flow
is advisory and any known status can be set. Payment is a separate field
that can be flipped at any kitchen status. Canceling an order deletes it.
"""

from __future__ import annotations

from datetime import datetime, timezone

from shared.config.constants import (
    KITCHEN_FLOW,
    Limits,
    OrderStatus,
    PaymentStatus,
    orders_collection_path,
)
from shared.config.logging import get_logger, mask_user_id
from shared.utils.exceptions import (
    ConfirmationRequiredError,
    EmptyCartError,
    InvalidStatusError,
    OrderNotFoundError,
    ValidationError,
)
from rest_api.models import Order, OrderLineItem, sum_lines
from rest_api.repositories import DocumentNotFoundError, DocumentStore
from rest_api.services.domain.cart import Cart
from rest_api.services.domain.order_numbers import OrderNumberSequencer, Sequencer

logger = get_logger(__name__)


def validate_status(value: str) -> str:
    if value not in OrderStatus.ALL:
        raise InvalidStatusError("status", value, OrderStatus.ALL)
    return value


def validate_payment(value: str) -> str:
    if value not in PaymentStatus.ALL:
        raise InvalidStatusError("payment", value, PaymentStatus.ALL)
    return value


def normalize_table(value: str | None) -> str | None:
    """Optional table label; blank means no table."""
    if value is None:
        return None
    table = str(value).strip()
    if not table:
        return None
    if len(table) > Limits.MAX_TABLE_LENGTH:
        raise ValidationError(
            f"table must be at most {Limits.MAX_TABLE_LENGTH} characters", field="table"
        )
    return table


class OrderService:
    """
    Domain service for one restaurant's orders.

    Usage:
        service = OrderService(store, restaurant_id)
        order = service.place_order(cart, payment=PaymentStatus.PENDING, table="4")
        service.advance(order.id)
    """

    def __init__(
        self,
        store: DocumentStore,
        restaurant_id: str,
        sequencer: Sequencer | None = None,
    ):
        self._store = store
        self._restaurant_id = restaurant_id
        self._sequencer = sequencer if sequencer is not None else OrderNumberSequencer(store)
        self._collection = orders_collection_path(restaurant_id)

    @property
    def restaurant_id(self) -> str:
        return self._restaurant_id

    @property
    def collection_path(self) -> str:
        return self._collection

    def _order_path(self, order_id: str) -> str:
        return f"{self._collection}/{order_id}"

    def _log_context(self, **extra) -> dict:
        return {"restaurant_id": mask_user_id(self._restaurant_id), **extra}

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        data = self._store.get_document(self._order_path(order_id))
        if data is None:
            raise OrderNotFoundError(order_id, **self._log_context())
        return Order.from_document(order_id, data)

    def list_orders(self) -> list[Order]:
        """All orders, newest order number first."""
        orders = [
            Order.from_document(snapshot.id, snapshot.data)
            for snapshot in self._store.list_collection(self._collection)
        ]
        orders.sort(key=lambda o: o.order_number, reverse=True)
        return orders

    # -------------------------------------------------------------------------
    # Commit
    # -------------------------------------------------------------------------

    def place_order(
        self,
        cart: Cart,
        payment: str | None = None,
        table: str | None = None,
    ) -> Order:
        """
        Turn the cart into a pending order.

        Line prices come from the cart as captured when each line was added;
        the catalog is not consulted again. The cart and its selections are
        cleared only after the order has been stored.

        Raises:
            EmptyCartError: If the cart has no lines
            InvalidStatusError: If payment is not a known payment status
            BackendUnavailableError: If the counter or the store failed (cart kept)
        """
        if cart.is_empty:
            raise EmptyCartError(**self._log_context())
        payment = validate_payment(payment if payment is not None else cart.payment)
        table = normalize_table(table if table is not None else cart.table)

        items = cart.snapshot()
        order = Order(
            id="",
            order_number=self._sequencer.next_order_number(self._restaurant_id),
            items=items,
            total=sum_lines(list(items.values())),
            payment=payment,
            status=OrderStatus.PENDING,
            table=table,
            created_at=datetime.now(timezone.utc),
        )
        order.id = self._store.create_document(self._collection, order.to_document())
        cart.clear()

        logger.info(
            "Order placed",
            **self._log_context(
                order_id=order.id,
                order_number=order.order_number,
                total=str(order.total),
                lines=len(order.items),
            ),
        )
        return order

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------

    def set_status(self, order_id: str, status: str) -> Order:
        """
        Overwrite the kitchen status.

        Transitions outside the kitchen flow are allowed and logged.
        """
        status = validate_status(status)
        order = self.get_order(order_id)
        if status != order.status and KITCHEN_FLOW.get(order.status) != status:
            logger.warning(
                "Order status changed outside kitchen flow",
                **self._log_context(order_id=order_id, from_status=order.status, to_status=status),
            )

        self._update(order_id, {"status": status})
        order.status = status
        logger.info("Order status set", **self._log_context(order_id=order_id, status=status))
        return order

    def advance(self, order_id: str) -> Order:
        """Move to the next kitchen state. Completed orders stay completed."""
        order = self.get_order(order_id)
        next_status = KITCHEN_FLOW.get(order.status)
        if next_status is None:
            return order

        self._update(order_id, {"status": next_status})
        logger.info(
            "Order advanced",
            **self._log_context(order_id=order_id, from_status=order.status, to_status=next_status),
        )
        order.status = next_status
        return order

    def set_payment(self, order_id: str, payment: str) -> Order:
        """Set payment at any kitchen status; the status is not touched."""
        payment = validate_payment(payment)
        self._update(order_id, {"payment": payment})
        logger.info("Order payment set", **self._log_context(order_id=order_id, payment=payment))
        return self.get_order(order_id)

    def add_items(self, order_id: str, cart: Cart) -> Order:
        """
        Append the cart's lines to a placed order and recompute its total.

        Lines already on the order keep their captured unit price and only
        grow in quantity. The cart is cleared after the write.
        """
        if cart.is_empty:
            raise EmptyCartError(**self._log_context(order_id=order_id))
        order = self.get_order(order_id)

        for key, line in cart.snapshot().items():
            existing = order.items.get(key)
            if existing is None:
                order.items[key] = line
            else:
                order.items[key] = OrderLineItem(
                    menu_item_id=existing.menu_item_id,
                    name=existing.name,
                    variant=existing.variant,
                    price=existing.price,
                    qty=existing.qty + line.qty,
                )
        order.total = sum_lines(list(order.items.values()))

        document = order.to_document()
        self._update(order_id, {"items": document["items"], "total": document["total"]})
        cart.clear()

        logger.info(
            "Items added to order",
            **self._log_context(order_id=order_id, total=str(order.total), lines=len(order.items)),
        )
        return order

    def cancel_order(self, order_id: str, confirmed: bool = False) -> None:
        """
        Delete an order. Its number is not reused.

        Raises:
            ConfirmationRequiredError: If not explicitly confirmed
            OrderNotFoundError: If the order is already gone
        """
        if not confirmed:
            raise ConfirmationRequiredError("cancel order", order_id=order_id)
        if not self._store.delete_document(self._order_path(order_id)):
            raise OrderNotFoundError(order_id, **self._log_context())
        logger.info("Order canceled", **self._log_context(order_id=order_id))

    def _update(self, order_id: str, fields: dict) -> None:
        try:
            self._store.update_fields(self._order_path(order_id), fields)
        except DocumentNotFoundError:
            raise OrderNotFoundError(order_id, **self._log_context())
