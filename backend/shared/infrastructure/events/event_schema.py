"""
Event Schema.

One JSON shape for every order event published to Redis.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class OrderEvent:
    """
    An order event.

    `entity` carries the order fields subscribers need (id, number, status,
    payment, total); `actor` identifies the owner who made the change.
    """

    type: str
    restaurant_id: str
    order_id: str
    entity: dict[str, Any] = field(default_factory=dict)
    actor: dict[str, Any] = field(default_factory=dict)
    ts: str | None = None
    v: int = 1

    def __post_init__(self) -> None:
        if not self.type or not isinstance(self.type, str):
            raise ValueError("Event type must be a non-empty string")
        if not self.restaurant_id or not isinstance(self.restaurant_id, str):
            raise ValueError("Event restaurant_id must be a non-empty string")
        if not self.order_id or not isinstance(self.order_id, str):
            raise ValueError("Event order_id must be a non-empty string")

    def to_json(self) -> str:
        data = asdict(self)
        data["ts"] = data["ts"] or datetime.now(timezone.utc).isoformat()
        return json.dumps(data, ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str) -> "OrderEvent":
        data = json.loads(raw)
        return cls(
            type=data["type"],
            restaurant_id=data["restaurant_id"],
            order_id=data["order_id"],
            entity=data.get("entity") or {},
            actor=data.get("actor") or {},
            ts=data.get("ts"),
            v=data.get("v", 1),
        )
