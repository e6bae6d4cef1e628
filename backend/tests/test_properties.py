"""
Property-based Testing with Hypothesis.

Money arithmetic, cart merging and order number sequencing.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from hypothesis import given, settings, strategies as st

from rest_api.models import MenuItem, Order
from rest_api.repositories import MemoryDocumentStore
from rest_api.services.analytics import BUCKET_NAMES, average_order_value, group_by_recency
from rest_api.services.domain import Cart, OrderNumberSequencer, OrderService

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)

prices = st.decimals(min_value=0, max_value=10_000, places=2, allow_nan=False, allow_infinity=False)
variants = st.sampled_from(["half", "full"])


class TestCartProperties:

    @given(
        picks=st.lists(
            st.tuples(st.integers(min_value=0, max_value=4), variants),
            min_size=1,
            max_size=40,
        ),
        half=prices,
        full=prices,
    )
    @settings(max_examples=50)
    def test_total_equals_sum_of_line_totals(self, picks, half, full):
        """Property: cart total = sum(price * qty) and count = number of adds."""
        items = [MenuItem(f"m{i}", f"Dish {i}", "Cat", half, full) for i in range(5)]
        cart = Cart()
        for index, variant in picks:
            cart.add_line(items[index], variant)

        expected = sum(
            (items[index].price_for(variant) for index, variant in picks), Decimal("0")
        )
        assert cart.total() == expected
        assert cart.count() == len(picks)
        assert len(cart) == len(set(picks))

    @given(picks=st.lists(variants, min_size=1, max_size=20))
    @settings(max_examples=30)
    def test_add_then_remove_returns_to_empty(self, picks):
        item = MenuItem("m1", "Dal", "Mains", Decimal("10"), Decimal("20"))
        cart = Cart()
        for variant in picks:
            cart.add_line(item, variant)
        for variant in picks:
            cart.remove_line(f"m1_{variant}")
        assert cart.is_empty


class TestOrderProperties:

    @given(quantities=st.lists(st.integers(min_value=1, max_value=5), min_size=1, max_size=10))
    @settings(max_examples=25)
    def test_order_numbers_are_consecutive(self, quantities):
        """Property: n committed orders receive exactly 1..n."""
        store = MemoryDocumentStore()
        item = MenuItem("m1", "Dal", "Mains", Decimal("10"), Decimal("20"))
        service = OrderService(store, "r1", OrderNumberSequencer(store))

        numbers = []
        for qty in quantities:
            cart = Cart()
            cart.set_quantity(item, "full", qty)
            numbers.append(service.place_order(cart).order_number)
        assert numbers == list(range(1, len(quantities) + 1))

    @given(totals=st.lists(prices, min_size=1, max_size=30))
    def test_average_lies_between_smallest_and_largest_total(self, totals):
        orders = [Order(id=str(i), order_number=i, total=t) for i, t in enumerate(totals)]
        average = average_order_value(orders)
        assert average == sum(totals, Decimal("0")) / len(totals)
        # Decimal division rounds at 28 significant digits
        slack = Decimal("1e-20")
        assert min(totals) - slack <= average <= max(totals) + slack

    @given(ages=st.lists(st.integers(min_value=0, max_value=200_000), max_size=30))
    def test_recency_partitions_every_order(self, ages):
        """Property: every order lands in exactly one bucket."""
        orders = [
            Order(id=str(i), order_number=i, created_at=NOW - timedelta(seconds=age))
            for i, age in enumerate(ages)
        ]
        groups = group_by_recency(orders, NOW)
        assert list(groups) == list(BUCKET_NAMES)
        assert sorted(o.id for bucket in groups.values() for o in bucket) == sorted(o.id for o in orders)
