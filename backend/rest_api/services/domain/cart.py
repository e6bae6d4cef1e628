"""
Cart Builder.

Client-local accumulation of (dish, portion, quantity) before an order is
placed. Unit prices are resolved from the dish when a line is first added
and never looked up again.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from shared.config.constants import PaymentStatus, Variant
from shared.utils.exceptions import ValidationError
from shared.utils.validators import validate_quantity
from rest_api.models import MenuItem, OrderLineItem, line_key, sum_lines


class Cart:
    """
    Lines keyed by "<menuItemId>_<variant>" plus the table and payment
    selections made while building the order.
    """

    def __init__(self) -> None:
        self._lines: dict[str, OrderLineItem] = {}
        self.table: str | None = None
        self.payment: str = PaymentStatus.PENDING

    @classmethod
    def from_lines(cls, lines: Iterable[OrderLineItem]) -> "Cart":
        """Rebuild a cart from a submitted snapshot; repeated keys are merged."""
        cart = cls()
        for line in lines:
            existing = cart._lines.get(line.key)
            if existing is None:
                cart._lines[line.key] = OrderLineItem(
                    menu_item_id=line.menu_item_id,
                    name=line.name,
                    variant=Variant(line.variant),
                    price=line.price,
                    qty=line.qty,
                )
            else:
                existing.qty += line.qty
        return cart

    def add_line(self, item: MenuItem, variant: Variant | str) -> OrderLineItem:
        """Add one portion of a dish, creating the line on first use."""
        if not item.available:
            raise ValidationError(f"{item.name} is not available", item_id=item.id)
        variant = Variant(variant)
        key = line_key(item.id, variant)

        line = self._lines.get(key)
        if line is None:
            line = OrderLineItem(
                menu_item_id=item.id,
                name=item.name,
                variant=variant,
                price=item.price_for(variant),
                qty=0,
            )
            self._lines[key] = line
        line.qty = validate_quantity(line.qty + 1)
        return line

    def remove_line(self, key: str) -> None:
        """Remove one portion; the line disappears at zero. Unknown keys are ignored."""
        line = self._lines.get(key)
        if line is None:
            return
        line.qty -= 1
        if line.qty <= 0:
            del self._lines[key]

    def set_quantity(self, item: MenuItem, variant: Variant | str, qty: int) -> None:
        """Set a line's quantity directly; zero or less removes it."""
        key = line_key(item.id, variant)
        if qty <= 0:
            self._lines.pop(key, None)
            return
        validate_quantity(qty)
        if key not in self._lines:
            self.add_line(item, variant)
        self._lines[key].qty = qty

    def total(self) -> Decimal:
        return sum_lines(list(self._lines.values()))

    def count(self) -> int:
        return sum(line.qty for line in self._lines.values())

    def lines(self) -> list[OrderLineItem]:
        return list(self._lines.values())

    def quantity(self, key: str) -> int:
        line = self._lines.get(key)
        return line.qty if line else 0

    def snapshot(self) -> dict[str, OrderLineItem]:
        """Independent copies of the current lines, keyed as in an order."""
        return {
            key: OrderLineItem(
                menu_item_id=line.menu_item_id,
                name=line.name,
                variant=line.variant,
                price=line.price,
                qty=line.qty,
            )
            for key, line in self._lines.items()
        }

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def clear(self) -> None:
        """Drop all lines and reset the table and payment selections."""
        self._lines.clear()
        self.table = None
        self.payment = PaymentStatus.PENDING

    def __len__(self) -> int:
        return len(self._lines)
