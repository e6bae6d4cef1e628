"""
Models Package.

- base: Base class and TimestampMixin for the storage tables
- document: DocumentRecord, CounterRecord (tables behind the SQL document store)
- tenant: Restaurant
- catalog: MenuItem
- order: Order, OrderLineItem

Storage tables are SQLAlchemy models; the domain entities are dataclasses
that convert to and from the JSON documents kept in the store.
"""

# Storage
from .base import Base, TimestampMixin
from .document import DocumentRecord, CounterRecord

# Domain documents
from .tenant import Restaurant, generate_slug, default_restaurant_name
from .catalog import MenuItem
from .order import Order, OrderLineItem, line_key, sum_lines

__all__ = [
    "Base",
    "TimestampMixin",
    "DocumentRecord",
    "CounterRecord",
    "Restaurant",
    "generate_slug",
    "default_restaurant_name",
    "MenuItem",
    "Order",
    "OrderLineItem",
    "line_key",
    "sum_lines",
]
