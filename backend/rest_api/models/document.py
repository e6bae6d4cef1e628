"""
Storage tables behind the SQL document store.

Every document lives in one row keyed by its full path
("restaurants/{rid}/orders/{oid}"); `collection` is the parent path
so a collection listing is a single indexed lookup.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import BigInteger, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class DocumentRecord(Base, TimestampMixin):
    """One JSON document addressed by path."""

    __tablename__ = "document"

    # Integer (not BigInteger) so SQLite auto-increments it
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    path: Mapped[str] = mapped_column(String(512), unique=True, nullable=False)
    collection: Mapped[str] = mapped_column(String(512), index=True, nullable=False)
    doc_id: Mapped[str] = mapped_column(String(128), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)


class CounterRecord(Base, TimestampMixin):
    """
    Atomic counter addressed by "<document path>#<field>".
    Incremented only through a single upsert statement.
    """

    __tablename__ = "document_counter"

    key: Mapped[str] = mapped_column(String(600), primary_key=True)
    value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
