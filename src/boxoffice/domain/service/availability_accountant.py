"""Domain service: Availability Accountant.

Answers "how many more of this ticket can be taken right now". The cache
holds the server's last known counts; every pending order (the active
one and the paid ones not yet synced) holds seats on top of that.

Two caps apply to a ticket: its own and its event's. Both are enforced
independently and the tighter one wins. Results are not clamped at
zero: a negative count means the local orders already overcommit.

This is a read-only projection. It never mutates the cache and is
recomputed on every call, proportional to the number of order lines.
"""

from __future__ import annotations

from collections.abc import Iterable

from boxoffice.domain.exceptions import EntityNotFoundError
from boxoffice.domain.model.event import Event
from boxoffice.domain.model.inventory import InventoryCache
from boxoffice.domain.model.order import Order
from boxoffice.domain.model.ticket import Ticket
from boxoffice.domain.model.value_objects import (
    UNBOUNDED,
    Remaining,
    Unbounded,
    remaining_seats,
    tightest,
)


class AvailabilityAccountant:

    def __init__(self, cache: InventoryCache) -> None:
        self._cache = cache

    # --- Reservations ---------------------------------------------------------

    def reserved_by_ticket(self, orders: Iterable[Order]) -> dict[int, int]:
        """Total quantity per ticket id across *orders*."""
        reserved: dict[int, int] = {}
        for order in orders:
            for ticket_id, qty in order.ordered_tickets().items():
                reserved[ticket_id] = reserved.get(ticket_id, 0) + qty
        return reserved

    def reserved_by_event(self, reserved_by_ticket: dict[int, int]) -> dict[int, int]:
        """Roll per-ticket reservations up to their events.

        Tickets that are unknown, or whose event is unknown, are left out.
        """
        reserved: dict[int, int] = {}
        for ticket_id, qty in reserved_by_ticket.items():
            ticket = self._cache.get_ticket(ticket_id)
            if ticket is None or self._cache.get_event(ticket.event_id) is None:
                continue
            reserved[ticket.event_id] = reserved.get(ticket.event_id, 0) + qty
        return reserved

    # --- Remaining seats ------------------------------------------------------

    def ticket_remaining(self, ticket: Ticket, orders: Iterable[Order]) -> Remaining:
        reserved = self.reserved_by_ticket(orders)
        return remaining_seats(ticket.capacity, reserved.get(ticket.id, 0))

    def event_remaining(self, ticket: Ticket, orders: Iterable[Order]) -> Remaining:
        event = self._event_of(ticket)
        reserved = self.reserved_by_event(self.reserved_by_ticket(orders))
        return remaining_seats(event.capacity, reserved.get(event.id, 0))

    def effective_remaining(self, ticket: Ticket, orders: Iterable[Order]) -> Remaining:
        """Seats left for *ticket*: the tighter of its own and its event's.

        UNBOUNDED only when both the ticket and its event are unbounded.
        Raises EntityNotFoundError if the ticket's event is not loaded.
        """
        event = self._event_of(ticket)
        if self._both_unbounded(ticket, event):
            return UNBOUNDED

        by_ticket = self.reserved_by_ticket(tuple(orders))
        by_event = self.reserved_by_event(by_ticket)
        return tightest(
            remaining_seats(ticket.capacity, by_ticket.get(ticket.id, 0)),
            remaining_seats(event.capacity, by_event.get(event.id, 0)),
        )

    def is_unbounded(self, ticket: Ticket) -> bool:
        """True if neither the ticket nor its (known) event has a seat cap."""
        event = self._cache.get_event(ticket.event_id)
        return event is not None and self._both_unbounded(ticket, event)

    # --- Internal helpers -----------------------------------------------------

    def _event_of(self, ticket: Ticket) -> Event:
        event = self._cache.get_event(ticket.event_id)
        if event is None:
            raise EntityNotFoundError(
                f"Event #{ticket.event_id} of ticket '{ticket.label}' is not loaded"
            )
        return event

    @staticmethod
    def _both_unbounded(ticket: Ticket, event: Event) -> bool:
        return isinstance(ticket.capacity, Unbounded) and isinstance(event.capacity, Unbounded)
