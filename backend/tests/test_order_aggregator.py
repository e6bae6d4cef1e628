"""
Tests for revenue figures, recency grouping and dashboard helpers.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from rest_api.models import Order
from rest_api.services.analytics import (
    BUCKET_NAMES,
    average_order_value,
    filter_orders,
    group_by_recency,
    new_pending_order_ids,
    orders_in_window,
    paid_revenue,
    revenue_in_window,
    status_counts,
    summarize,
    time_ago,
    today_revenue,
    total_revenue,
)
from shared.config.constants import OrderStatus, PaymentStatus
from shared.utils.validators import round_money

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def make_order(number, total, created_at=NOW, payment=PaymentStatus.PENDING, status=OrderStatus.PENDING):
    return Order(
        id=f"o{number}",
        order_number=number,
        total=Decimal(total),
        payment=payment,
        status=status,
        created_at=created_at,
    )


class TestRevenue:

    def test_empty(self):
        summary = summarize([])
        assert summary.total == Decimal("0")
        assert summary.paid == Decimal("0")
        assert summary.order_count == 0
        assert summary.average_order_value == Decimal("0")

    def test_totals_use_stored_total(self):
        orders = [
            make_order(1, "100", payment=PaymentStatus.COMPLETED),
            make_order(2, "50.50"),
        ]
        assert total_revenue(orders) == Decimal("150.50")
        assert paid_revenue(orders) == Decimal("100")

    def test_average_is_revenue_over_count(self):
        orders = [make_order(1, "10"), make_order(2, "10"), make_order(3, "10.01")]
        assert average_order_value(orders) == Decimal("30.01") / 3
        assert average_order_value([make_order(1, "0.01"), make_order(2, "0.00")]) == Decimal("0.005")

    def test_display_rounding_is_half_up_to_cents(self):
        assert round_money(Decimal("30.01") / 3) == Decimal("10.00")
        assert round_money(Decimal("0.005")) == Decimal("0.01")
        assert str(round_money(Decimal("0"))) == "0.00"

    def test_summary(self):
        orders = [make_order(1, "30", payment=PaymentStatus.COMPLETED), make_order(2, "20")]
        summary = summarize(orders)
        assert summary.order_count == 2
        assert summary.average_order_value == Decimal("25.00")


class TestWindows:

    def test_window_bounds_inclusive(self):
        orders = [
            make_order(1, "10", datetime(2024, 3, 1, 0, 0, 0, tzinfo=timezone.utc)),
            make_order(2, "20", datetime(2024, 3, 2, 23, 59, 59, tzinfo=timezone.utc)),
            make_order(3, "40", datetime(2024, 3, 3, 0, 0, 0, tzinfo=timezone.utc)),
            make_order(4, "80", datetime(2024, 2, 29, 23, 59, 59, tzinfo=timezone.utc)),
        ]
        selected = orders_in_window(orders, date(2024, 3, 1), date(2024, 3, 2))
        assert [o.order_number for o in selected] == [1, 2]
        assert revenue_in_window(orders, date(2024, 3, 1), date(2024, 3, 2)).total == Decimal("30")

    def test_open_bounds(self):
        orders = [
            make_order(1, "10", datetime(2024, 1, 1, tzinfo=timezone.utc)),
            make_order(2, "20", datetime(2024, 6, 1, tzinfo=timezone.utc)),
        ]
        assert len(orders_in_window(orders)) == 2
        assert [o.order_number for o in orders_in_window(orders, start=date(2024, 3, 1))] == [2]
        assert [o.order_number for o in orders_in_window(orders, end=date(2024, 3, 1))] == [1]

    def test_orders_without_timestamp_excluded(self):
        assert orders_in_window([make_order(1, "10", created_at=None)]) == []

    def test_window_in_local_timezone(self):
        kolkata = ZoneInfo("Asia/Kolkata")
        # 20:00 UTC on the 1st is 01:30 on the 2nd in Kolkata
        order = make_order(1, "10", datetime(2024, 3, 1, 20, 0, tzinfo=timezone.utc))
        assert orders_in_window([order], date(2024, 3, 2), date(2024, 3, 2), kolkata) == [order]
        assert orders_in_window([order], date(2024, 3, 2), date(2024, 3, 2)) == []

    def test_today_revenue(self):
        orders = [
            make_order(1, "10", NOW - timedelta(hours=11)),
            make_order(2, "20", NOW - timedelta(hours=13)),
            make_order(3, "40", None),
        ]
        assert today_revenue(orders, NOW) == Decimal("10")


class TestRecency:

    def test_all_buckets_present(self):
        assert list(group_by_recency([], NOW)) == list(BUCKET_NAMES)

    @pytest.mark.parametrize(
        "age,bucket",
        [
            (timedelta(minutes=5), "last_hour"),
            (timedelta(hours=1), "last_hour"),
            (timedelta(hours=1, seconds=1), "last_3_hours"),
            (timedelta(hours=6), "last_6_hours"),
            (timedelta(hours=11), "last_12_hours"),
            (timedelta(hours=24), "last_24_hours"),
            (timedelta(days=2), "older"),
        ],
    )
    def test_bucket_by_age(self, age, bucket):
        groups = group_by_recency([make_order(1, "10", NOW - age)], NOW)
        assert [o.order_number for o in groups[bucket]] == [1]

    def test_missing_timestamp_is_older(self):
        groups = group_by_recency([make_order(1, "10", None)], NOW)
        assert len(groups["older"]) == 1


class TestDashboard:

    def test_status_counts(self):
        orders = [
            make_order(1, "10"),
            make_order(2, "10", status=OrderStatus.READY, payment=PaymentStatus.COMPLETED),
            make_order(3, "10", status=OrderStatus.READY),
        ]
        counts = status_counts(orders)
        assert counts == {
            "pending": 1,
            "preparing": 0,
            "ready": 2,
            "completed": 0,
            "paid": 1,
        }

    def test_filters(self):
        orders = [
            make_order(1, "10"),
            make_order(2, "25", status=OrderStatus.COMPLETED),
            make_order(3, "40", payment=PaymentStatus.COMPLETED, status=OrderStatus.READY),
        ]
        assert len(filter_orders(orders, "all")) == 3
        assert [o.order_number for o in filter_orders(orders, "pending")] == [1]
        assert [o.order_number for o in filter_orders(orders, "completed")] == [2]
        assert [o.order_number for o in filter_orders(orders, "paid")] == [3]

    def test_search_matches_number_or_total(self):
        orders = [make_order(12, "99"), make_order(3, "120"), make_order(4, "7")]
        assert [o.order_number for o in filter_orders(orders, search="12")] == [12, 3]
        assert filter_orders(orders, search="") == orders

    def test_unknown_filter(self):
        with pytest.raises(ValueError):
            filter_orders([], "refunded")

    def test_new_pending_first_snapshot_reports_nothing(self):
        assert new_pending_order_ids(None, [make_order(1, "10")]) == []

    def test_new_pending_only_unseen_pending(self):
        orders = [
            make_order(1, "10"),
            make_order(2, "10"),
            make_order(3, "10", status=OrderStatus.PREPARING),
        ]
        assert new_pending_order_ids({"o1"}, orders) == ["o2"]

    @pytest.mark.parametrize(
        "age,text",
        [
            (timedelta(seconds=42), "42s ago"),
            (timedelta(minutes=5), "5m ago"),
            (timedelta(hours=3), "3h ago"),
            (timedelta(days=2), "2d ago"),
            (timedelta(seconds=-5), "0s ago"),
        ],
    )
    def test_time_ago(self, age, text):
        assert time_ago(NOW - age, NOW) == text

    def test_time_ago_without_timestamp(self):
        assert time_ago(None, NOW) == ""
