"""
Tests for the order lifecycle service.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from rest_api.services.domain import Cart, OrderService
from shared.config.constants import OrderStatus, PaymentStatus
from shared.utils.exceptions import (
    BackendUnavailableError,
    ConfirmationRequiredError,
    EmptyCartError,
    InvalidStatusError,
    OrderNotFoundError,
    ValidationError,
)

OWNER_ID = "owner-0001"


def cart_with(*lines):
    """Cart from (item, variant, times) tuples."""
    cart = Cart()
    for item, variant, times in lines:
        for _ in range(times):
            cart.add_line(item, variant)
    return cart


class TestPlaceOrder:

    def test_place_order(self, order_service, paneer, naan):
        cart = cart_with((paneer, "half", 2), (naan, "full", 1))
        order = order_service.place_order(cart)

        assert order.order_number == 1
        assert order.status == OrderStatus.PENDING
        assert order.payment == PaymentStatus.PENDING
        assert order.total == Decimal("290")
        assert set(order.items) == {f"{paneer.id}_half", f"{naan.id}_full"}
        assert order.created_at is not None
        assert order_service.get_order(order.id) == order

    def test_cart_cleared_after_success(self, order_service, paneer):
        cart = cart_with((paneer, "full", 1))
        cart.table = "4"
        cart.payment = PaymentStatus.COMPLETED
        order = order_service.place_order(cart)

        assert order.table == "4"
        assert order.payment == PaymentStatus.COMPLETED
        assert cart.is_empty
        assert cart.table is None

    def test_explicit_arguments_override_cart_selections(self, order_service, paneer):
        cart = cart_with((paneer, "full", 1))
        cart.table = "4"
        order = order_service.place_order(cart, payment=PaymentStatus.COMPLETED, table=" 9 ")
        assert order.table == "9"
        assert order.is_paid

    def test_blank_table_is_omitted(self, memory_store, order_service, paneer):
        order = order_service.place_order(cart_with((paneer, "full", 1)), table="  ")
        assert order.table is None
        assert "table" not in memory_store.get_document(f"{order_service.collection_path}/{order.id}")

    def test_long_table_rejected(self, order_service, paneer):
        with pytest.raises(ValidationError):
            order_service.place_order(cart_with((paneer, "full", 1)), table="x" * 50)

    def test_empty_cart_rejected_without_consuming_number(self, memory_store, order_service, paneer):
        with pytest.raises(EmptyCartError):
            order_service.place_order(Cart())
        assert order_service.list_orders() == []
        assert order_service.place_order(cart_with((paneer, "full", 1))).order_number == 1

    def test_invalid_payment_rejected(self, order_service, paneer):
        cart = cart_with((paneer, "full", 1))
        with pytest.raises(InvalidStatusError):
            order_service.place_order(cart, payment="maybe")
        assert not cart.is_empty

    def test_numbers_increase(self, order_service, paneer):
        numbers = [
            order_service.place_order(cart_with((paneer, "full", 1))).order_number
            for _ in range(3)
        ]
        assert numbers == [1, 2, 3]

    def test_price_captured_from_cart(self, menu_service, order_service, paneer):
        cart = cart_with((paneer, "full", 1))
        menu_service.edit_item(paneer.id, paneer.name, "1", "2")
        order = order_service.place_order(cart)
        assert order.total == Decimal("200")

    def test_store_failure_keeps_cart(self, memory_store, paneer):
        sequencer = MagicMock()
        sequencer.next_order_number.side_effect = BackendUnavailableError("redis")
        service = OrderService(memory_store, OWNER_ID, sequencer)

        cart = cart_with((paneer, "full", 2))
        with pytest.raises(BackendUnavailableError):
            service.place_order(cart)
        assert cart.count() == 2
        assert service.list_orders() == []

    def test_list_orders_newest_first(self, order_service, paneer):
        for _ in range(3):
            order_service.place_order(cart_with((paneer, "full", 1)))
        assert [o.order_number for o in order_service.list_orders()] == [3, 2, 1]


class TestStatusAndPayment:

    @pytest.fixture
    def order(self, order_service, paneer):
        return order_service.place_order(cart_with((paneer, "full", 1)))

    def test_advance_through_kitchen_flow(self, order_service, order):
        statuses = [order_service.advance(order.id).status for _ in range(4)]
        assert statuses == [
            OrderStatus.PREPARING,
            OrderStatus.READY,
            OrderStatus.COMPLETED,
            OrderStatus.COMPLETED,
        ]

    def test_set_status_outside_flow_allowed(self, order_service, order):
        assert order_service.set_status(order.id, OrderStatus.COMPLETED).status == OrderStatus.COMPLETED
        assert order_service.set_status(order.id, OrderStatus.PENDING).status == OrderStatus.PENDING

    def test_unknown_status_rejected(self, order_service, order):
        with pytest.raises(InvalidStatusError):
            order_service.set_status(order.id, "burnt")
        assert order_service.get_order(order.id).status == OrderStatus.PENDING

    def test_payment_independent_of_status(self, order_service, order):
        paid = order_service.set_payment(order.id, PaymentStatus.COMPLETED)
        assert paid.is_paid
        assert paid.status == OrderStatus.PENDING

        order_service.advance(order.id)
        assert order_service.get_order(order.id).is_paid

    def test_payment_can_be_reverted(self, order_service, order):
        order_service.set_payment(order.id, PaymentStatus.COMPLETED)
        assert order_service.set_payment(order.id, PaymentStatus.PENDING).payment == PaymentStatus.PENDING

    def test_unknown_payment_rejected(self, order_service, order):
        with pytest.raises(InvalidStatusError):
            order_service.set_payment(order.id, "card")

    def test_missing_order(self, order_service):
        with pytest.raises(OrderNotFoundError):
            order_service.set_status("gone", OrderStatus.READY)
        with pytest.raises(OrderNotFoundError):
            order_service.set_payment("gone", PaymentStatus.COMPLETED)


class TestAddItems:

    def test_new_lines_appended_and_total_recomputed(self, order_service, paneer, naan):
        order = order_service.place_order(cart_with((paneer, "half", 1)))
        updated = order_service.add_items(order.id, cart_with((naan, "full", 2)))

        assert len(updated.items) == 2
        assert updated.total == Decimal("220")
        assert order_service.get_order(order.id).total == Decimal("220")

    def test_existing_line_keeps_price_and_sums_quantity(self, menu_service, order_service, paneer):
        order = order_service.place_order(cart_with((paneer, "full", 1)))
        repriced = menu_service.edit_item(paneer.id, paneer.name, "120", "250")

        updated = order_service.add_items(order.id, cart_with((repriced, "full", 2)))
        line = updated.items[f"{paneer.id}_full"]
        assert line.qty == 3
        assert line.price == Decimal("200")
        assert updated.total == Decimal("600")

    def test_order_number_and_status_unchanged(self, order_service, paneer):
        order = order_service.place_order(cart_with((paneer, "full", 1)))
        order_service.advance(order.id)
        updated = order_service.add_items(order.id, cart_with((paneer, "half", 1)))
        assert updated.order_number == order.order_number
        assert updated.status == OrderStatus.PREPARING

    def test_cart_cleared(self, order_service, paneer):
        order = order_service.place_order(cart_with((paneer, "full", 1)))
        cart = cart_with((paneer, "half", 1))
        order_service.add_items(order.id, cart)
        assert cart.is_empty

    def test_empty_cart_rejected(self, order_service, paneer):
        order = order_service.place_order(cart_with((paneer, "full", 1)))
        with pytest.raises(EmptyCartError):
            order_service.add_items(order.id, Cart())

    def test_missing_order_keeps_cart(self, order_service, paneer):
        cart = cart_with((paneer, "half", 1))
        with pytest.raises(OrderNotFoundError):
            order_service.add_items("gone", cart)
        assert not cart.is_empty


class TestCancel:

    def test_cancel_requires_confirmation(self, order_service, paneer):
        order = order_service.place_order(cart_with((paneer, "full", 1)))
        with pytest.raises(ConfirmationRequiredError):
            order_service.cancel_order(order.id)
        assert order_service.get_order(order.id)

    def test_cancel_deletes_and_number_is_not_reused(self, order_service, paneer):
        order = order_service.place_order(cart_with((paneer, "full", 1)))
        order_service.cancel_order(order.id, confirmed=True)

        with pytest.raises(OrderNotFoundError):
            order_service.get_order(order.id)
        assert order_service.place_order(cart_with((paneer, "full", 1))).order_number == 2

    def test_cancel_twice(self, order_service, paneer):
        order = order_service.place_order(cart_with((paneer, "full", 1)))
        order_service.cancel_order(order.id, confirmed=True)
        with pytest.raises(OrderNotFoundError):
            order_service.cancel_order(order.id, confirmed=True)


def test_orders_run_on_sql_store(sql_store):
    """Full lifecycle against the SQL document store."""
    from rest_api.services.domain import MenuService

    item = MenuService(sql_store, OWNER_ID).add_item("Dal", "80", "140", "Mains")
    service = OrderService(sql_store, OWNER_ID)

    order = service.place_order(cart_with((item, "half", 3)))
    service.advance(order.id)
    service.set_payment(order.id, PaymentStatus.COMPLETED)

    stored = service.get_order(order.id)
    assert stored.total == Decimal("240")
    assert stored.status == OrderStatus.PREPARING
    assert stored.is_paid
