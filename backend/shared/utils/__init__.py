"""
Utilities module: exceptions, validators, health checks.
"""

from shared.utils.exceptions import (
    AppException,
    ValidationError,
    EmptyCartError,
    ConfirmationRequiredError,
    InvalidStatusError,
    AuthRequiredError,
    NotFoundError,
    OrderNotFoundError,
    MenuItemNotFoundError,
    RestaurantNotFoundError,
    BackendUnavailableError,
)

__all__ = [
    "AppException",
    "ValidationError",
    "EmptyCartError",
    "ConfirmationRequiredError",
    "InvalidStatusError",
    "AuthRequiredError",
    "NotFoundError",
    "OrderNotFoundError",
    "MenuItemNotFoundError",
    "RestaurantNotFoundError",
    "BackendUnavailableError",
]
