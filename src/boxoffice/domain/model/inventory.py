"""InventoryCache — local store of events and tickets for one POS session.

Events and tickets live in two id-indexed stores; every cross-reference
(ticket → event, event → tickets, product → tickets) is an id lookup,
never an object pointer.

Records are merged in place: a second record for a known id overwrites
only the fields it carries. The cache never raises on unknown or dangling
ids; they simply don't show up in the derived queries until resolved.
A record that fails to parse is skipped with a warning, like a record
without an id.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from boxoffice.domain.exceptions import ValidationError
from boxoffice.domain.model.event import Event
from boxoffice.domain.model.records import as_records
from boxoffice.domain.model.ticket import Ticket

Records = Mapping[str, Any] | Iterable[Mapping[str, Any]]


class InventoryCache:
    """Session-scoped store of events and tickets.

    Invariants:
    - one entity per id in each store; merging never duplicates
    - a ticket is indexed by product and attached to its event exactly once
    - a ticket whose event is unknown is kept but stays out of
      event-based queries until that event is upserted
    """

    def __init__(self) -> None:
        self._events: dict[int, Event] = {}
        self._tickets: dict[int, Ticket] = {}
        self._tickets_by_product: dict[int, list[int]] = {}
        # event id -> ticket ids that arrived before their event
        self._unbound_tickets: dict[int, list[int]] = {}

    # --- Merge ----------------------------------------------------------------

    def upsert_events(self, records: Records) -> list[Event]:
        """Insert new events, merge known ones in place."""
        merged: list[Event] = []
        inserted = 0
        for record in as_records(records):
            event_id = record.get("id")
            if event_id is None:
                logger.warning("Skipping event record without id: {}", record)
                continue

            event = self._events.get(event_id)
            if event is None:
                event = Event(id=event_id)
                if not _merge(event, record):
                    continue
                self._events[event_id] = event
                for ticket_id in self._unbound_tickets.pop(event_id, []):
                    event.attach_ticket(ticket_id)
                inserted += 1
            elif not _merge(event, record):
                continue
            merged.append(event)

        logger.debug("Merged {} event(s), {} new", len(merged), inserted)
        return merged

    def upsert_tickets(self, records: Records) -> list[Ticket]:
        """Insert new tickets (indexing them once), merge known ones in place."""
        merged: list[Ticket] = []
        inserted = 0
        for record in as_records(records):
            ticket_id = record.get("id")
            if ticket_id is None:
                logger.warning("Skipping ticket record without id: {}", record)
                continue

            ticket = self._tickets.get(ticket_id)
            if ticket is None:
                ticket = Ticket(id=ticket_id)
                if not _merge(ticket, record):
                    continue
                self._tickets[ticket_id] = ticket
                self._index(ticket)
                inserted += 1
            elif not _merge(ticket, record):
                continue
            merged.append(ticket)

        logger.debug("Merged {} ticket(s), {} new", len(merged), inserted)
        return merged

    # --- Lookups --------------------------------------------------------------

    def get_event(self, event_id: int | None) -> Event | None:
        if event_id is None:
            return None
        return self._events.get(event_id)

    def get_ticket(self, ticket_id: int | None) -> Ticket | None:
        if ticket_id is None:
            return None
        return self._tickets.get(ticket_id)

    def events(self) -> list[Event]:
        """Every known event, in load order."""
        return list(self._events.values())

    def tickets_for_event(self, event_id: int) -> list[Ticket]:
        event = self._events.get(event_id)
        if event is None:
            return []
        return [self._tickets[tid] for tid in event.ticket_ids if tid in self._tickets]

    def tickets_for_product(self, product_id: int) -> list[Ticket]:
        return [self._tickets[tid] for tid in self._tickets_by_product.get(product_id, [])]

    def events_for_product(self, product_id: int) -> list[Event]:
        """Distinct known events reachable from the product's tickets."""
        events: list[Event] = []
        seen: set[int] = set()
        for ticket in self.tickets_for_product(product_id):
            event = self.get_event(ticket.event_id)
            if event is None or event.id in seen:
                continue
            seen.add(event.id)
            events.append(event)
        return events

    # --- Internal helpers -----------------------------------------------------

    def _index(self, ticket: Ticket) -> None:
        if ticket.product_id is not None:
            self._tickets_by_product.setdefault(ticket.product_id, []).append(ticket.id)

        if ticket.event_id is None:
            return
        event = self._events.get(ticket.event_id)
        if event is not None:
            event.attach_ticket(ticket.id)
        else:
            self._unbound_tickets.setdefault(ticket.event_id, []).append(ticket.id)


def _merge(entity: Event | Ticket, record: Mapping[str, Any]) -> bool:
    """Merge *record* into *entity*; log and report False if it is malformed."""
    try:
        entity.merge(record)
    except (ValueError, TypeError, ValidationError) as exc:
        logger.warning(
            "Skipping malformed {} record #{}: {}", type(entity).__name__, entity.id, exc
        )
        return False
    return True
