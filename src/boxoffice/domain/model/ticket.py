"""Ticket entity — a sellable ticket type of one event.

A ticket refers to its event and to its catalog product by id only.
``ticket.event`` does not exist: resolve it with
``cache.get_event(ticket.event_id)``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from boxoffice.domain.model.records import many2one_id, many2one_name
from boxoffice.domain.model.value_objects import (
    CAPACITY_FIELDS,
    UNBOUNDED,
    Capacity,
    Money,
    merge_capacity,
)


@dataclass
class Ticket:
    id: int
    event_id: int | None = None
    product_id: int | None = None
    name: str = ""
    product_name: str = ""
    price: Money = field(default_factory=lambda: Money.of("0.00"))
    capacity: Capacity = UNBOUNDED

    def merge(self, record: Mapping[str, Any]) -> None:
        """Overwrite only the fields *record* provides; all or nothing."""
        changes: dict[str, Any] = {}
        if "name" in record:
            changes["name"] = record["name"] or ""
        if "event_id" in record:
            changes["event_id"] = many2one_id(record["event_id"])
        if "product_id" in record:
            changes["product_id"] = many2one_id(record["product_id"])
            changes["product_name"] = many2one_name(record["product_id"]) or self.product_name
        if "price" in record:
            changes["price"] = Money.of(record["price"] or 0, self.price.currency)
        if CAPACITY_FIELDS.intersection(record):
            changes["capacity"] = merge_capacity(self.capacity, record)
        for name, value in changes.items():
            setattr(self, name, value)

    @property
    def label(self) -> str:
        return self.name or self.product_name or f"Ticket #{self.id}"
