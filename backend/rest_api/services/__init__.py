"""
Services module for business logic.

- domain/: menu catalog, cart, order lifecycle, order numbers, restaurants
- analytics/: revenue aggregation, recency grouping, CSV export

Usage:
    from rest_api.services.domain import OrderService
    from rest_api.services.analytics import revenue_in_window
"""
