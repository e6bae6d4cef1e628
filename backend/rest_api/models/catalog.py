"""
Menu item document.

Prices are two independent portion tiers; nothing forces
price_half <= price_full.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from shared.config.constants import Variant
from shared.utils.validators import (
    format_decimal,
    format_timestamp,
    parse_decimal,
    parse_timestamp,
)


@dataclass
class MenuItem:
    id: str
    name: str
    category: str
    price_half: Decimal
    price_full: Decimal
    available: bool = True
    created_at: datetime | None = None

    def price_for(self, variant: Variant | str) -> Decimal:
        """Unit price of the given portion."""
        if Variant(variant) is Variant.HALF:
            return self.price_half
        return self.price_full

    def to_document(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "priceHalf": format_decimal(self.price_half),
            "priceFull": format_decimal(self.price_full),
            "available": self.available,
            "createdAt": format_timestamp(self.created_at),
        }

    @classmethod
    def from_document(cls, item_id: str, data: dict[str, Any]) -> "MenuItem":
        return cls(
            id=item_id,
            name=data.get("name", ""),
            category=data.get("category", ""),
            price_half=parse_decimal(data.get("priceHalf")),
            price_full=parse_decimal(data.get("priceFull")),
            available=bool(data.get("available", True)),
            created_at=parse_timestamp(data.get("createdAt")),
        )
