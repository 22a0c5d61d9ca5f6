"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from boxoffice.domain.model.checkout import CheckoutRejection
from boxoffice.domain.model.value_objects import Remaining, Unbounded


def format_remaining(remaining: Remaining) -> str:
    if isinstance(remaining, Unbounded):
        return "unlimited"
    return str(remaining)


@dataclass(frozen=True)
class OrderLineDTO:
    """Output: a single order line as displayed to the user."""

    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str
    ticket_id: int | None = None
    price_manually_set: bool = False


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    status: str
    lines: list[OrderLineDTO]
    total: str
    created_at: str


@dataclass(frozen=True)
class TicketAvailabilityDTO:
    ticket_id: int
    name: str
    price: str
    remaining: str  # a count, or "unlimited"


@dataclass(frozen=True)
class EventAvailabilityDTO:
    event_id: int
    name: str
    date_begin: str
    tickets: list[TicketAvailabilityDTO] = field(default_factory=list)


@dataclass(frozen=True)
class AddTicketResult:
    """Output: the order after a ticket was added, and what is left."""

    order: OrderDTO
    ticket_name: str
    remaining: str
    overcommitted: bool


@dataclass(frozen=True)
class CatalogSummary:
    events: int
    tickets: int
    products: int


# ---------------------------------------------------------------------------
# Checkout gate
# ---------------------------------------------------------------------------


class GateState(Enum):
    IDLE = "IDLE"
    RECONCILING = "RECONCILING"
    ACCEPTED = "ACCEPTED"
    REJECTED_UNAVAILABLE = "REJECTED_UNAVAILABLE"
    REJECTED_NETWORK_ERROR = "REJECTED_NETWORK_ERROR"


@dataclass(frozen=True)
class CheckoutOutcome:
    state: GateState
    rejection: CheckoutRejection | None = None

    @property
    def accepted(self) -> bool:
        return self.state == GateState.ACCEPTED
