"""
Order Aggregator.

Pure functions over a list of orders, recomputed from every fresh
snapshot of the collection. Nothing here reads or writes the store.

Calendar-day logic takes an explicit timezone (settings.local_timezone
at the HTTP boundary); orders without a timestamp are left out of every
time window and land in the "older" recency bucket.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from decimal import Decimal

from shared.config.constants import OrderStatus, PaymentStatus, QuickFilter
from shared.utils.validators import sanitize_search_term
from rest_api.models import Order

ZERO = Decimal("0")

# (bucket name, upper bound of the order's age), checked in order
RECENCY_BUCKETS: tuple[tuple[str, timedelta], ...] = (
    ("last_hour", timedelta(hours=1)),
    ("last_3_hours", timedelta(hours=3)),
    ("last_6_hours", timedelta(hours=6)),
    ("last_12_hours", timedelta(hours=12)),
    ("last_24_hours", timedelta(hours=24)),
)
OLDER = "older"
BUCKET_NAMES: tuple[str, ...] = tuple(name for name, _ in RECENCY_BUCKETS) + (OLDER,)


@dataclass(frozen=True)
class RevenueSummary:
    total: Decimal
    paid: Decimal
    order_count: int
    average_order_value: Decimal


# =============================================================================
# Reductions
# =============================================================================


def total_revenue(orders: Iterable[Order]) -> Decimal:
    return sum((order.total for order in orders), ZERO)


def paid_revenue(orders: Iterable[Order]) -> Decimal:
    return sum((order.total for order in orders if order.is_paid), ZERO)


def average_order_value(orders: Iterable[Order]) -> Decimal:
    """Total revenue divided by order count, unrounded; 0 for no orders."""
    orders = list(orders)
    if not orders:
        return ZERO
    return total_revenue(orders) / len(orders)


def summarize(orders: Iterable[Order]) -> RevenueSummary:
    orders = list(orders)
    return RevenueSummary(
        total=total_revenue(orders),
        paid=paid_revenue(orders),
        order_count=len(orders),
        average_order_value=average_order_value(orders),
    )


# =============================================================================
# Time windows
# =============================================================================


def _local(moment: datetime, tz: tzinfo) -> datetime:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz)


def orders_in_window(
    orders: Iterable[Order],
    start: date | None = None,
    end: date | None = None,
    tz: tzinfo = timezone.utc,
) -> list[Order]:
    """
    Orders created between start 00:00:00 and end 23:59:59 local time.

    Both bounds are inclusive and a missing bound leaves that side open.
    """
    start_at = datetime.combine(start, time.min, tzinfo=tz) if start else None
    end_at = datetime.combine(end, time(23, 59, 59), tzinfo=tz) if end else None

    selected = []
    for order in orders:
        if order.created_at is None:
            continue
        created = _local(order.created_at, tz)
        if start_at is not None and created < start_at:
            continue
        if end_at is not None and created > end_at:
            continue
        selected.append(order)
    return selected


def revenue_in_window(
    orders: Iterable[Order],
    start: date | None = None,
    end: date | None = None,
    tz: tzinfo = timezone.utc,
) -> RevenueSummary:
    return summarize(orders_in_window(orders, start, end, tz))


def today_revenue(orders: Iterable[Order], now: datetime, tz: tzinfo = timezone.utc) -> Decimal:
    """Sum of orders created on the same local calendar day as now."""
    today = _local(now, tz).date()
    return total_revenue(
        order
        for order in orders
        if order.created_at is not None and _local(order.created_at, tz).date() == today
    )


def group_by_recency(orders: Iterable[Order], now: datetime) -> dict[str, list[Order]]:
    """
    Partition orders by age relative to now.

    Each order goes to the first bucket whose bound its age does not exceed;
    every bucket name is present, in order, even when empty.
    """
    groups: dict[str, list[Order]] = {name: [] for name in BUCKET_NAMES}
    for order in orders:
        groups[recency_bucket(order, now)].append(order)
    return groups


def recency_bucket(order: Order, now: datetime) -> str:
    if order.created_at is None:
        return OLDER
    age = _local(now, timezone.utc) - _local(order.created_at, timezone.utc)
    for name, bound in RECENCY_BUCKETS:
        if age <= bound:
            return name
    return OLDER


# =============================================================================
# Dashboard helpers
# =============================================================================


def status_counts(orders: Iterable[Order]) -> dict[str, int]:
    """Orders per kitchen status plus the number of paid orders."""
    counts = {status: 0 for status in OrderStatus.ALL}
    counts["paid"] = 0
    for order in orders:
        if order.status in counts:
            counts[order.status] += 1
        if order.payment == PaymentStatus.COMPLETED:
            counts["paid"] += 1
    return counts


def filter_orders(
    orders: Iterable[Order],
    quick_filter: str = QuickFilter.ALL,
    search: str | None = None,
) -> list[Order]:
    """
    Order history filtering.

    Quick filters: all, pending (kitchen), paid (payment), completed (kitchen).
    The search term matches a substring of the order number or the total.
    """
    if quick_filter not in QuickFilter.CHOICES:
        raise ValueError(f"Unknown filter: {quick_filter}")
    term = sanitize_search_term(search)

    result = []
    for order in orders:
        if quick_filter == QuickFilter.PENDING and order.status != OrderStatus.PENDING:
            continue
        if quick_filter == QuickFilter.PAID and order.payment != PaymentStatus.COMPLETED:
            continue
        if quick_filter == QuickFilter.COMPLETED and order.status != OrderStatus.COMPLETED:
            continue
        if term and term not in str(order.order_number) and term not in str(order.total):
            continue
        result.append(order)
    return result


def new_pending_order_ids(previous_ids: set[str] | None, orders: Iterable[Order]) -> list[str]:
    """
    Ids of pending orders that were not in the previous snapshot.

    previous_ids=None marks the first snapshot, which reports nothing.
    """
    if previous_ids is None:
        return []
    return [
        order.id
        for order in orders
        if order.id not in previous_ids and order.status == OrderStatus.PENDING
    ]


def time_ago(created_at: datetime | None, now: datetime) -> str:
    """Short relative age: "42s ago", "5m ago", "3h ago", "2d ago"."""
    if created_at is None:
        return ""
    seconds = max(0, int((_local(now, timezone.utc) - _local(created_at, timezone.utc)).total_seconds()))
    if seconds < 60:
        return f"{seconds}s ago"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"
