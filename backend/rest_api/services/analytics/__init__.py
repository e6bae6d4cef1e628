"""
Analytics over order snapshots: revenue, recency grouping, CSV export.
"""

from .order_aggregator import (
    RevenueSummary,
    RECENCY_BUCKETS,
    BUCKET_NAMES,
    OLDER,
    total_revenue,
    paid_revenue,
    average_order_value,
    summarize,
    orders_in_window,
    revenue_in_window,
    today_revenue,
    group_by_recency,
    recency_bucket,
    status_counts,
    filter_orders,
    new_pending_order_ids,
    time_ago,
)
from .export import EXPORT_HEADER, export_rows, to_csv, export_filename

__all__ = [
    "RevenueSummary",
    "RECENCY_BUCKETS",
    "BUCKET_NAMES",
    "OLDER",
    "total_revenue",
    "paid_revenue",
    "average_order_value",
    "summarize",
    "orders_in_window",
    "revenue_in_window",
    "today_revenue",
    "group_by_recency",
    "recency_bucket",
    "status_counts",
    "filter_orders",
    "new_pending_order_ids",
    "time_ago",
    "EXPORT_HEADER",
    "export_rows",
    "to_csv",
    "export_filename",
]
