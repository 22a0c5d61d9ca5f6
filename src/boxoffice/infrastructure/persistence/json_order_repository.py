"""JSON-file-backed implementation of DraftOrderRepository.

Keeps the orders that still hold seats locally (the open draft and the
paid orders waiting to be synced) across restarts of the terminal.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from boxoffice.domain.model.order import Order, OrderLine, OrderStatus
from boxoffice.domain.model.value_objects import Money, Quantity
from boxoffice.domain.repository.order_repository import DraftOrderRepository


class JsonDraftOrderRepository(DraftOrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- DraftOrderRepository interface ---------------------------------------

    def next_id(self) -> int:
        orders = self._load_raw()
        if not orders:
            return 1
        return max(o["id"] for o in orders) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_pending(self) -> list[Order]:
        orders = [self._to_domain(raw) for raw in self._load_raw()]
        return [o for o in orders if o.is_pending]

    def save(self, order: Order) -> None:
        orders = self._load_raw()

        if order.id is None:
            order.id = self.next_id()

        # Upsert: replace if exists, otherwise append
        replaced = False
        for i, raw in enumerate(orders):
            if raw["id"] == order.id:
                orders[i] = self._to_raw(order)
                replaced = True
                break
        if not replaced:
            orders.append(self._to_raw(order))

        self._persist_raw(orders)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "lines": [export_line(line) for line in order.lines],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        return Order(
            id=raw["id"],
            lines=[import_line(line) for line in raw["lines"]],
            status=OrderStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, orders: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(orders, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


def export_line(line: OrderLine) -> dict[str, Any]:
    return {
        "product_id": line.product_id,
        "product_name": line.product_name,
        "quantity": line.quantity.value,
        "unit_price": str(line.unit_price.amount),
        "currency": line.unit_price.currency,
        "ticket_id": line.ticket_id,
        "price_manually_set": line.price_manually_set,
        "discount": str(line.discount),
        "groupable": line.groupable,
        "tracking": line.tracking,
    }


def import_line(raw: dict[str, Any]) -> OrderLine:
    return OrderLine(
        product_id=raw["product_id"],
        product_name=raw["product_name"],
        quantity=Quantity(raw["quantity"]),
        unit_price=Money(Decimal(raw["unit_price"]), raw.get("currency", "USD")),
        ticket_id=raw.get("ticket_id"),
        price_manually_set=bool(raw.get("price_manually_set", False)),
        discount=Decimal(raw.get("discount", "0")),
        groupable=raw.get("groupable", True),
        tracking=raw.get("tracking", "none"),
    )
