"""
CSV export of the order history.

Rows are built from orders as plain values; rendering them to text is
separate so callers decide where the file goes.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from datetime import date, timezone, tzinfo

from rest_api.models import Order

EXPORT_HEADER: tuple[str, ...] = ("Order #", "Date", "Total", "Payment", "Status", "Items")
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def export_rows(orders: Iterable[Order], tz: tzinfo = timezone.utc) -> list[list[str]]:
    """One row per order: number, local timestamp, total, payment, status, item summary."""
    rows = []
    for order in orders:
        created = order.created_at.astimezone(tz).strftime(DATE_FORMAT) if order.created_at else ""
        rows.append([
            str(order.order_number),
            created,
            str(order.total),
            order.payment,
            order.status,
            order.item_summary(),
        ])
    return rows


def to_csv(rows: Iterable[Sequence[str]]) -> str:
    """Header line, then one fully quoted line per row."""
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(EXPORT_HEADER)
    csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n").writerows(rows)
    return buffer.getvalue()


def export_filename(day: date) -> str:
    return f"orders-{day.isoformat()}.csv"
