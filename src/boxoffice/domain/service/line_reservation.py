"""Domain service: Line Reservation.

Rules that tie an order line to an event ticket:

- a ticket line is priced from its ticket, unless the price was set by
  hand (``price_manually_set``), which pins it;
- two lines merge only when nothing distinguishes them: same ticket (or
  both none), same product, a groupable unit, no discount, the same price
  at the currency's precision, and no lot/serial tracking.

Both rules are plain objects handed to the order (``Order.merge_policy``,
``Order.refresh_prices``) instead of being baked into the line type.
"""

from __future__ import annotations

from boxoffice.domain.exceptions import ValidationError
from boxoffice.domain.model.inventory import InventoryCache
from boxoffice.domain.model.order import OrderLine
from boxoffice.domain.model.product import Product
from boxoffice.domain.model.ticket import Ticket
from boxoffice.domain.model.value_objects import Money, Quantity


class TicketPricing:
    """Pricing strategy: ticket lines cost what their ticket costs."""

    def __init__(self, cache: InventoryCache) -> None:
        self._cache = cache

    def __call__(self, line: OrderLine) -> Money:
        return self.list_price(line)

    def list_price(self, line: OrderLine) -> Money:
        ticket = self._cache.get_ticket(line.ticket_id)
        if ticket is None:
            return line.unit_price
        return ticket.price


class MergePolicy:
    """Merge-eligibility predicate for two order lines."""

    def __init__(self, currency_decimals: int = 2) -> None:
        self._decimals = currency_decimals

    def __call__(self, line: OrderLine, other: OrderLine) -> bool:
        if line.ticket_id != other.ticket_id:
            return False
        if line.product_id != other.product_id:
            return False
        if not line.groupable:
            return False
        if line.discount > 0 or other.discount > 0:
            return False
        if not line.unit_price.is_close(other.unit_price, self._decimals):
            return False
        if line.is_tracked:
            return False
        return True


class LineReservation:

    def __init__(self, cache: InventoryCache, currency_decimals: int = 2) -> None:
        self.pricing = TicketPricing(cache)
        self.merge_policy = MergePolicy(currency_decimals)

    def bind(
        self,
        ticket: Ticket,
        product: Product,
        quantity: int = 1,
        price: Money | None = None,
    ) -> OrderLine:
        """Build an order line for *ticket*.

        The line is priced at the ticket's price; passing *price* overrides
        it and marks the line as manually priced.
        """
        if ticket.product_id != product.id:
            raise ValidationError(
                f"Ticket '{ticket.label}' is not sold as product '{product.name}'"
            )

        line = OrderLine(
            product_id=product.id,
            product_name=product.name,
            quantity=Quantity(quantity),
            unit_price=ticket.price,
            ticket_id=ticket.id,
            groupable=product.groupable,
            tracking=product.tracking,
        )
        if price is not None:
            line.override_price(price)
        return line
