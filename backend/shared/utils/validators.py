"""
Shared validators and converters for user input and stored documents.

Validators raise ValidationError (the HTTP 400 domain error) so a caller at
any boundary gets the same message. Parsers are lenient readers of values
already persisted in the document store.
"""

import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from shared.config.constants import Limits
from shared.utils.exceptions import ValidationError


def validate_text(value: Any, field: str, max_length: int) -> str:
    """
    Validate a required free-text field.

    Returns:
        The stripped text

    Raises:
        ValidationError: If the value is missing, blank or too long
    """
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required", field=field)
    text = value.strip()
    if len(text) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters", field=field)
    return text


def validate_price(value: Any, field: str) -> Decimal:
    """
    Validate a price given as a number or a numeric string.

    Returns:
        The price as a Decimal

    Raises:
        ValidationError: If the value is empty, non-numeric, not finite or negative
    """
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required", field=field)
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number", field=field, value=str(value))
    if not price.is_finite():
        raise ValidationError(f"{field} must be a finite number", field=field)
    if price < 0:
        raise ValidationError(f"{field} must not be negative", field=field)
    return price


def validate_quantity(
    quantity: int, min_val: int = 1, max_val: int = Limits.MAX_LINE_QUANTITY
) -> int:
    """
    Validate quantity is within acceptable range.

    Raises:
        ValidationError: If quantity is not an integer or outside allowed range
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Quantity must be an integer", field="qty")
    if quantity < min_val:
        raise ValidationError(f"Minimum quantity is {min_val}", field="qty")
    if quantity > max_val:
        raise ValidationError(f"Maximum quantity is {max_val}", field="qty")
    return quantity


def sanitize_search_term(term: str | None, max_length: int = 100) -> str:
    """
    Sanitize a search term typed in a filter box.

    Returns:
        Lowercased, trimmed term without control characters
    """
    if not term:
        return ""

    term = term.strip()

    if len(term) > max_length:
        term = term[:max_length]

    term = re.sub(r"[\x00-\x1f\x7f-\x9f]", "", term)

    return term.lower()


# =============================================================================
# Stored value parsers
# =============================================================================


def parse_decimal(value: Any) -> Decimal:
    """Read a stored money value (string, int or float); missing values read as 0."""
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


def format_decimal(value: Decimal) -> str:
    """Serialize a money value for storage."""
    return str(value)


def round_money(value: Decimal) -> Decimal:
    """Round a computed amount to cents (half up) for display."""
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def parse_timestamp(value: Any) -> datetime | None:
    """
    Read a stored timestamp.

    ISO strings and datetimes are accepted; naive values are taken as UTC.
    Unreadable values read as missing.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime | None) -> str | None:
    """Serialize a timestamp for storage."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()
