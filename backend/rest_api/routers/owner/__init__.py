"""
Owner API router - combines the authenticated sub-routers.

- restaurant: the owner's restaurant (created on first access)
- menu: menu catalog management and the order-building view
- orders: placing orders, kitchen workflow, payment, cancellation
- reports: revenue summaries, recency grouping, CSV export

All routes are prefixed with /api and require a Bearer token.
"""

from fastapi import APIRouter

from .restaurant import router as restaurant_router
from .menu import router as menu_router
from .orders import router as orders_router
from .reports import router as reports_router


router = APIRouter(prefix="/api")

router.include_router(restaurant_router)
router.include_router(menu_router)
router.include_router(orders_router)
router.include_router(reports_router)

__all__ = ["router"]
