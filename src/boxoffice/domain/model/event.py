"""Event entity — a capacity-limited occasion tickets are sold for.

Events are created and updated only through the inventory cache. An
update merges the fields present in the incoming record and leaves every
other field untouched, so a partial availability record never erases the
name or dates loaded with the catalog.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from boxoffice.domain.model.records import many2one_id, parse_datetime
from boxoffice.domain.model.value_objects import (
    CAPACITY_FIELDS,
    UNBOUNDED,
    Capacity,
    merge_capacity,
)


@dataclass
class Event:
    """An event and the ids of its tickets.

    ``ticket_ids`` is an ordered, duplicate-free list. Tickets are looked
    up through the cache; the event never holds ticket objects.
    """

    id: int
    name: str = ""
    display_name: str = ""
    event_type_id: int | None = None
    country_id: int | None = None
    date_begin: datetime | None = None
    date_end: datetime | None = None
    capacity: Capacity = UNBOUNDED
    ticket_ids: list[int] = field(default_factory=list)

    def merge(self, record: Mapping[str, Any]) -> None:
        """Overwrite only the fields *record* provides.

        All values are read before any is assigned: a record that fails to
        parse leaves the event as it was.
        """
        changes: dict[str, Any] = {}
        if "name" in record:
            changes["name"] = record["name"] or ""
        if "display_name" in record:
            changes["display_name"] = record["display_name"] or ""
        if "event_type_id" in record:
            changes["event_type_id"] = many2one_id(record["event_type_id"])
        if "country_id" in record:
            changes["country_id"] = many2one_id(record["country_id"])
        if "date_begin" in record:
            changes["date_begin"] = parse_datetime(record["date_begin"])
        if "date_end" in record:
            changes["date_end"] = parse_datetime(record["date_end"])
        if CAPACITY_FIELDS.intersection(record):
            changes["capacity"] = merge_capacity(self.capacity, record)
        for name, value in changes.items():
            setattr(self, name, value)

    def attach_ticket(self, ticket_id: int) -> None:
        if ticket_id not in self.ticket_ids:
            self.ticket_ids.append(ticket_id)

    @property
    def label(self) -> str:
        return self.display_name or self.name or f"Event #{self.id}"
