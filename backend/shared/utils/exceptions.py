"""
Centralized exceptions for consistent error handling.

Domain services raise these directly; FastAPI renders them as HTTP errors
and each one logs itself with its context when constructed.

Usage:
    from shared.utils.exceptions import NotFoundError, ValidationError

    raise OrderNotFoundError(order_id, restaurant_id=rid)
    raise ValidationError("priceHalf must be a number", field="priceHalf")
"""

from fastapi import HTTPException, status
from typing import Any

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Missing or invalid input (400). Raised before any state is mutated.

    Usage:
        raise ValidationError("Name is required", field="name")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class EmptyCartError(ValidationError):
    """Order commit attempted with no cart lines."""

    def __init__(self, **log_context: Any):
        super().__init__("No items selected", **log_context)


class ConfirmationRequiredError(ValidationError):
    """Destructive operation attempted without explicit confirmation."""

    def __init__(self, action: str, **log_context: Any):
        super().__init__(f"Confirmation required to {action}", action=action, **log_context)


class InvalidStatusError(ValidationError):
    """Unknown status or payment value."""

    def __init__(self, kind: str, value: str, allowed: tuple[str, ...], **log_context: Any):
        allowed_str = ", ".join(allowed)
        super().__init__(
            f"Invalid {kind} '{value}', expected one of: {allowed_str}",
            kind=kind,
            value=value,
            **log_context,
        )


# =============================================================================
# 401 Unauthorized Errors
# =============================================================================


class AuthRequiredError(AppException):
    """No active session or invalid credentials (401)."""

    def __init__(self, detail: str = "Authentication required", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            log_level="info",
            headers={"WWW-Authenticate": "Bearer"},
            **log_context,
        )


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404), e.g. a record deleted concurrently.

    Usage:
        raise NotFoundError("Order", order_id)
    """

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} '{entity_id}' not found"
        else:
            detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


class OrderNotFoundError(NotFoundError):
    """Order not found (or already canceled)."""

    def __init__(self, order_id: str | None = None, **log_context: Any):
        super().__init__("Order", order_id, **log_context)


class MenuItemNotFoundError(NotFoundError):
    """Menu item not found (or already deleted)."""

    def __init__(self, item_id: str | None = None, **log_context: Any):
        super().__init__("Menu item", item_id, **log_context)


class RestaurantNotFoundError(NotFoundError):
    """Restaurant not found."""

    def __init__(self, identifier: str | None = None, **log_context: Any):
        super().__init__("Restaurant", identifier, **log_context)


# =============================================================================
# 503 Service Unavailable Errors
# =============================================================================


class BackendUnavailableError(AppException):
    """
    Storage or messaging backend failed (503). The caller may retry.

    Usage:
        raise BackendUnavailableError("document store", operation="create_document")
    """

    def __init__(self, service: str, retry_after: int | None = None, **log_context: Any):
        headers = None
        if retry_after:
            headers = {"Retry-After": str(retry_after)}

        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Service {service} temporarily unavailable",
            log_level="error",
            headers=headers,
            service=service,
            **log_context,
        )
