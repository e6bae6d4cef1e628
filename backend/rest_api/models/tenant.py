"""
Restaurant document.

One restaurant per owning account; its id is the owner's user id.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from shared.utils.validators import format_timestamp, parse_timestamp


_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def generate_slug(name: str) -> str:
    """Lowercase the name and collapse every run of non-alphanumerics to one hyphen."""
    return _NON_ALNUM_RUN.sub("-", name.strip().lower())


def default_restaurant_name(email: str | None) -> str:
    """Name given to a restaurant created on the owner's first session."""
    local_part = (email or "").split("@")[0].strip()
    return f"{local_part or 'My'}'s Restaurant"


@dataclass
class Restaurant:
    id: str
    name: str
    slug: str
    owner_id: str
    created_at: datetime | None = None

    def to_document(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "slug": self.slug,
            "ownerId": self.owner_id,
            "createdAt": format_timestamp(self.created_at),
        }

    @classmethod
    def from_document(cls, restaurant_id: str, data: dict[str, Any]) -> "Restaurant":
        return cls(
            id=restaurant_id,
            name=data.get("name", ""),
            slug=data.get("slug", ""),
            owner_id=data.get("ownerId", restaurant_id),
            created_at=parse_timestamp(data.get("createdAt")),
        )
