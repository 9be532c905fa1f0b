"""
Order Store — thread-safe in-memory repository of orders.

Orders are immutable once created; the store hands out the same frozen
records it holds, so readers can never see a half-built order.

Usage::

    from storage.order_store import OrderStore
    store = OrderStore()
    order = store.create({"item": "widget-pro", "quantity": 2})
    store.get(order.id)
"""

from __future__ import annotations

import math
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

DEFAULT_ITEM   = "widget"
DEFAULT_STATUS = "processed"


@dataclass(frozen=True)
class Order:
    id: str
    item: str
    quantity: int
    status: str
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id":        self.id,
            "item":      self.item,
            "quantity":  self.quantity,
            "status":    self.status,
            "createdAt": self.created_at,
        }


def _normalize_quantity(value: Any) -> int:
    """Coerce to a positive integer, falling back to 1."""
    if isinstance(value, bool):
        return 1
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 1
    if not math.isfinite(number) or number < 1:
        return 1
    return int(number)


def utc_now_iso() -> str:
    now = datetime.now(tz=timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class OrderStore:
    """Concurrent-safe map of order id to :class:`Order`."""

    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._lock = threading.Lock()

    def create(self, payload: Mapping[str, Any]) -> Order:
        order = Order(
            id=str(payload.get("id") or uuid.uuid4()),
            item=str(payload.get("item") or DEFAULT_ITEM),
            quantity=_normalize_quantity(payload.get("quantity")),
            status=str(payload.get("status") or DEFAULT_STATUS),
            created_at=utc_now_iso(),
        )
        with self._lock:
            self._orders[order.id] = order
        return order

    def get(self, order_id: str) -> Order | None:
        with self._lock:
            return self._orders.get(order_id)

    def list(self) -> list[Order]:
        """Snapshot of every order currently in the store."""
        with self._lock:
            return list(self._orders.values())

    def seed(self, records: Iterable[Mapping[str, Any]]) -> list[Order]:
        return [self.create(record) for record in records]

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)
