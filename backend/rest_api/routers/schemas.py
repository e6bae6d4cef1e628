"""
Pydantic request/response schemas for the REST API.

Money fields are Decimal and serialize as strings in JSON.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from shared.config.constants import Variant
from shared.utils.validators import round_money
from rest_api.models import MenuItem, Order, OrderLineItem, Restaurant
from rest_api.services.analytics import RevenueSummary


# =============================================================================
# Common Types
# =============================================================================

VariantName = Literal["half", "full"]
PriceInput = Decimal | int | float | str


# =============================================================================
# Restaurant Schemas
# =============================================================================


class RestaurantOutput(BaseModel):
    id: str
    name: str
    slug: str
    owner_id: str
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, restaurant: Restaurant) -> "RestaurantOutput":
        return cls(
            id=restaurant.id,
            name=restaurant.name,
            slug=restaurant.slug,
            owner_id=restaurant.owner_id,
            created_at=restaurant.created_at,
        )


class PublicRestaurantOutput(BaseModel):
    """Restaurant as shown on the public menu page (no owner id)."""

    name: str
    slug: str


# =============================================================================
# Menu Schemas
# =============================================================================


class MenuItemCreate(BaseModel):
    """
    New dish. Fields are checked by the menu service so empty or
    non-numeric values fail with a 400 ValidationError.
    """

    name: str | None = None
    category: str | None = None
    price_half: PriceInput | None = None
    price_full: PriceInput | None = None


class MenuItemUpdate(BaseModel):
    name: str | None = None
    price_half: PriceInput | None = None
    price_full: PriceInput | None = None


class MenuItemOutput(BaseModel):
    id: str
    name: str
    category: str
    price_half: Decimal
    price_full: Decimal
    available: bool
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, item: MenuItem) -> "MenuItemOutput":
        return cls(
            id=item.id,
            name=item.name,
            category=item.category,
            price_half=item.price_half,
            price_full=item.price_full,
            available=item.available,
            created_at=item.created_at,
        )


class MenuCategoryOutput(BaseModel):
    category: str
    items: list[MenuItemOutput]


def grouped_menu_output(grouped: dict[str, list[MenuItem]]) -> list[MenuCategoryOutput]:
    return [
        MenuCategoryOutput(
            category=category,
            items=[MenuItemOutput.from_domain(item) for item in items],
        )
        for category, items in grouped.items()
    ]


class PublicMenuOutput(BaseModel):
    restaurant: PublicRestaurantOutput
    categories: list[MenuCategoryOutput]


# =============================================================================
# Order Schemas
# =============================================================================


class CartLineInput(BaseModel):
    """A cart line as built on the client: price captured when the line was added."""

    menu_item_id: str = Field(min_length=1, max_length=128)
    name: str = Field(min_length=1, max_length=120)
    variant: VariantName
    price: Decimal = Field(ge=0)
    qty: int = Field(ge=1, le=999)

    def to_domain(self) -> OrderLineItem:
        return OrderLineItem(
            menu_item_id=self.menu_item_id,
            name=self.name,
            variant=Variant(self.variant),
            price=self.price,
            qty=self.qty,
        )


class PlaceOrderRequest(BaseModel):
    items: list[CartLineInput] = Field(default_factory=list)
    payment: str = "pending"
    table: str | None = None


class AddItemsRequest(BaseModel):
    items: list[CartLineInput] = Field(default_factory=list)


class StatusUpdateRequest(BaseModel):
    status: str


class PaymentUpdateRequest(BaseModel):
    payment: str


class OrderLineOutput(BaseModel):
    key: str
    menu_item_id: str
    name: str
    variant: VariantName
    price: Decimal
    qty: int
    line_total: Decimal

    @classmethod
    def from_domain(cls, line: OrderLineItem) -> "OrderLineOutput":
        return cls(
            key=line.key,
            menu_item_id=line.menu_item_id,
            name=line.name,
            variant=line.variant.value,
            price=line.price,
            qty=line.qty,
            line_total=line.line_total,
        )


class OrderOutput(BaseModel):
    id: str
    order_number: int
    items: list[OrderLineOutput]
    total: Decimal
    payment: str
    status: str
    table: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderOutput":
        return cls(
            id=order.id,
            order_number=order.order_number,
            items=[OrderLineOutput.from_domain(line) for line in order.items.values()],
            total=order.total,
            payment=order.payment,
            status=order.status,
            table=order.table,
            created_at=order.created_at,
        )


# =============================================================================
# Report Schemas
# =============================================================================


class RevenueSummaryOutput(BaseModel):
    total: Decimal
    paid: Decimal
    order_count: int
    average_order_value: Decimal

    @classmethod
    def from_domain(cls, summary: RevenueSummary) -> "RevenueSummaryOutput":
        return cls(
            total=summary.total,
            paid=summary.paid,
            order_count=summary.order_count,
            average_order_value=round_money(summary.average_order_value),
        )


class ReportsSummaryOutput(BaseModel):
    overall: RevenueSummaryOutput
    today_revenue: Decimal
    status_counts: dict[str, int]


class RecencyBucketOutput(BaseModel):
    bucket: str
    order_count: int
    revenue: Decimal
    orders: list[OrderOutput]
