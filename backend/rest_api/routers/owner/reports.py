"""
Reports endpoints: revenue summaries, recency grouping, CSV export.
"""

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from shared.config.constants import QuickFilter
from shared.config.logging import get_logger, mask_user_id
from shared.config.settings import settings
from shared.utils.exceptions import InvalidStatusError
from rest_api.routers.owner._base import get_order_service
from rest_api.routers.schemas import (
    OrderOutput,
    RecencyBucketOutput,
    ReportsSummaryOutput,
    RevenueSummaryOutput,
)
from rest_api.services.analytics import (
    export_filename,
    export_rows,
    filter_orders,
    group_by_recency,
    orders_in_window,
    revenue_in_window,
    status_counts,
    summarize,
    to_csv,
    today_revenue,
    total_revenue,
)
from rest_api.services.domain import OrderService

logger = get_logger(__name__)

router = APIRouter(tags=["reports"])


@router.get("/reports/summary", response_model=ReportsSummaryOutput)
def get_reports_summary(
    service: OrderService = Depends(get_order_service),
) -> ReportsSummaryOutput:
    """All-time figures, today's revenue and the dashboard counters."""
    orders = service.list_orders()
    now = datetime.now(timezone.utc)
    return ReportsSummaryOutput(
        overall=RevenueSummaryOutput.from_domain(summarize(orders)),
        today_revenue=today_revenue(orders, now, settings.local_timezone),
        status_counts=status_counts(orders),
    )


@router.get("/reports/revenue", response_model=RevenueSummaryOutput)
def get_revenue(
    start: date | None = None,
    end: date | None = None,
    service: OrderService = Depends(get_order_service),
) -> RevenueSummaryOutput:
    """Revenue between two local calendar days, both inclusive."""
    summary = revenue_in_window(service.list_orders(), start, end, settings.local_timezone)
    return RevenueSummaryOutput.from_domain(summary)


@router.get("/reports/recency", response_model=list[RecencyBucketOutput])
def get_recency(
    service: OrderService = Depends(get_order_service),
) -> list[RecencyBucketOutput]:
    groups = group_by_recency(service.list_orders(), datetime.now(timezone.utc))
    return [
        RecencyBucketOutput(
            bucket=bucket,
            order_count=len(orders),
            revenue=total_revenue(orders),
            orders=[OrderOutput.from_domain(order) for order in orders],
        )
        for bucket, orders in groups.items()
    ]


@router.get("/reports/export.csv")
def export_orders_csv(
    filter: str = Query(default=QuickFilter.ALL),
    search: str | None = Query(default=None, max_length=100),
    start: date | None = None,
    end: date | None = None,
    service: OrderService = Depends(get_order_service),
) -> Response:
    """The order history as a CSV download, filtered like the history screen."""
    if filter not in QuickFilter.CHOICES:
        raise InvalidStatusError("filter", filter, QuickFilter.CHOICES)

    tz = settings.local_timezone
    orders = filter_orders(service.list_orders(), filter, search)
    if start or end:
        orders = orders_in_window(orders, start, end, tz)
    content = to_csv(export_rows(orders, tz))
    filename = export_filename(datetime.now(tz).date())

    logger.info(
        "Orders exported",
        restaurant_id=mask_user_id(service.restaurant_id),
        rows=len(orders),
    )
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
