"""
Order and embedded line item documents.

`total` is written together with `items` and is authoritative once stored;
readers never recompute it from the lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from shared.config.constants import OrderStatus, PaymentStatus, Variant
from shared.utils.validators import (
    format_decimal,
    format_timestamp,
    parse_decimal,
    parse_timestamp,
)


def line_key(menu_item_id: str, variant: Variant | str) -> str:
    """Key of a line in an order's item map: "<menuItemId>_<variant>"."""
    return f"{menu_item_id}_{Variant(variant).value}"


@dataclass
class OrderLineItem:
    """A menu item and portion with the unit price captured when it was added."""

    menu_item_id: str
    name: str
    variant: Variant
    price: Decimal
    qty: int

    @property
    def key(self) -> str:
        return line_key(self.menu_item_id, self.variant)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.qty

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.menu_item_id,
            "name": self.name,
            "type": self.variant.value,
            "price": format_decimal(self.price),
            "qty": self.qty,
        }

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "OrderLineItem":
        return cls(
            menu_item_id=data.get("id", ""),
            name=data.get("name", ""),
            variant=Variant(data.get("type", Variant.FULL.value)),
            price=parse_decimal(data.get("price")),
            qty=int(data.get("qty", 0)),
        )


def sum_lines(lines: list[OrderLineItem]) -> Decimal:
    return sum((line.line_total for line in lines), Decimal("0"))


@dataclass
class Order:
    id: str
    order_number: int
    items: dict[str, OrderLineItem] = field(default_factory=dict)
    total: Decimal = Decimal("0")
    payment: str = PaymentStatus.PENDING
    status: str = OrderStatus.PENDING
    table: str | None = None
    created_at: datetime | None = None

    @property
    def is_paid(self) -> bool:
        return self.payment == PaymentStatus.COMPLETED

    def item_summary(self) -> str:
        """Lines rendered as "name xqty; name xqty", e.g. "Paneer x2; Naan x1"."""
        return "; ".join(f"{line.name} x{line.qty}" for line in self.items.values())

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {
            "orderNumber": self.order_number,
            "items": {key: line.to_document() for key, line in self.items.items()},
            "total": format_decimal(self.total),
            "payment": self.payment,
            "status": self.status,
            "createdAt": format_timestamp(self.created_at),
        }
        if self.table:
            document["table"] = self.table
        return document

    @classmethod
    def from_document(cls, order_id: str, data: dict[str, Any]) -> "Order":
        raw_items = data.get("items") or {}
        return cls(
            id=order_id,
            order_number=int(data.get("orderNumber", 0)),
            items={key: OrderLineItem.from_document(line) for key, line in raw_items.items()},
            total=parse_decimal(data.get("total")),
            payment=data.get("payment", PaymentStatus.PENDING),
            status=data.get("status", OrderStatus.PENDING),
            table=data.get("table") or None,
            created_at=parse_timestamp(data.get("createdAt")),
        )
