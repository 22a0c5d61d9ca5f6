"""Order aggregate — a draft order and its lines.

Every order not yet acknowledged by the backend (the active one being
edited and the paid ones waiting to be synced) holds seats: its ticket
lines count as reservations against the local inventory.

How lines merge and how they are priced is not decided here. A merge
predicate is injected into the order and a pricing function is passed to
``refresh_prices``; see ``boxoffice.domain.service.line_reservation``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from boxoffice.domain.exceptions import ValidationError
from boxoffice.domain.model.product import TRACKED_MODES
from boxoffice.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    DRAFT = "DRAFT"
    PAID = "PAID"
    SYNCED = "SYNCED"


@dataclass
class OrderLine:
    """One line of a draft order.

    ``ticket_id`` is set for ticket lines; a line without it is an
    ordinary product line. ``price_manually_set`` pins ``unit_price``:
    once set, list-price refreshes leave the line alone.
    """

    product_id: int
    product_name: str
    quantity: Quantity
    unit_price: Money
    ticket_id: int | None = None
    price_manually_set: bool = False
    discount: Decimal = Decimal("0")  # percent
    groupable: bool = True
    tracking: str = "none"

    @property
    def line_total(self) -> Money:
        total = self.unit_price * self.quantity.value
        if self.discount:
            total = total.discounted(self.discount)
        return total

    @property
    def is_ticket_line(self) -> bool:
        return self.ticket_id is not None

    @property
    def is_tracked(self) -> bool:
        return self.tracking in TRACKED_MODES

    def override_price(self, price: Money) -> None:
        """Set the price by hand; it survives later list-price refreshes."""
        self.unit_price = price
        self.price_manually_set = True

    def apply_list_price(self, price: Money) -> None:
        if self.price_manually_set:
            return
        self.unit_price = price

    def absorb(self, other: OrderLine) -> None:
        """Take over the quantity of a line merged into this one."""
        self.quantity = self.quantity + other.quantity


MergePredicate = Callable[[OrderLine, OrderLine], bool]
LinePricing = Callable[[OrderLine], Money]


def never_merge(line: OrderLine, other: OrderLine) -> bool:
    return False


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINES = 50


@dataclass
class Order:
    """Aggregate root for point-of-sale orders.

    Only DRAFT orders can be edited. ``mark_paid`` finalizes the order
    locally; it keeps counting as a reservation until ``mark_synced``.
    """

    id: int | None
    lines: list[OrderLine] = field(default_factory=list)
    status: OrderStatus = OrderStatus.DRAFT
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    merge_policy: MergePredicate = field(default=never_merge, repr=False, compare=False)

    # --- Editing --------------------------------------------------------------

    def add_line(self, line: OrderLine) -> OrderLine:
        """Add *line*, merging it into the last line when the policy allows.

        Returns the line that now carries the quantity.
        """
        self._assert_editable()
        if self.lines and self.merge_policy(self.lines[-1], line):
            last = self.lines[-1]
            last.absorb(line)
            return last

        if len(self.lines) >= MAX_LINES:
            raise ValidationError(f"Maximum {MAX_LINES} lines per order")
        self.lines.append(line)
        return line

    def remove_line(self, index: int) -> OrderLine:
        self._assert_editable()
        if not 0 <= index < len(self.lines):
            raise ValidationError(f"Order has no line #{index + 1}")
        return self.lines.pop(index)

    def refresh_prices(self, pricing: LinePricing) -> None:
        """Re-apply list prices to every line not priced by hand."""
        for line in self.lines:
            line.apply_list_price(pricing(line))

    # --- State transitions ----------------------------------------------------

    def mark_paid(self) -> None:
        """Transition DRAFT -> PAID.

        The availability check must pass *before* calling this
        (coordinated by the application handler via the checkout gate).
        """
        if self.status != OrderStatus.DRAFT:
            raise ValidationError(
                f"Cannot finalize order: current status is {self.status.value}, "
                f"expected DRAFT"
            )
        if not self.lines:
            raise ValidationError("Order must contain at least one line")
        self.status = OrderStatus.PAID

    def mark_synced(self) -> None:
        """Transition PAID -> SYNCED once the backend has the order."""
        if self.status != OrderStatus.PAID:
            raise ValidationError(
                f"Cannot sync order in {self.status.value} status"
            )
        self.status = OrderStatus.SYNCED

    # --- Computed properties --------------------------------------------------

    @property
    def is_pending(self) -> bool:
        """True while the order still holds seats locally."""
        return self.status in (OrderStatus.DRAFT, OrderStatus.PAID)

    @property
    def total(self) -> Money:
        result = Money(Decimal("0.00"))
        for line in self.lines:
            result = result + line.line_total
        return result

    def ordered_tickets(self) -> dict[int, int]:
        """Quantity per ticket id over this order's ticket lines."""
        ordered: dict[int, int] = {}
        for line in self.lines:
            if line.ticket_id is None:
                continue
            ordered[line.ticket_id] = ordered.get(line.ticket_id, 0) + line.quantity.value
        return ordered

    # --- Internal helpers -----------------------------------------------------

    def _assert_editable(self) -> None:
        if self.status != OrderStatus.DRAFT:
            raise ValidationError(
                f"Cannot edit order in {self.status.value} status"
            )
