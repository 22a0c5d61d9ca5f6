"""Application service: Add Ticket use case.

Adds a ticket line to the active order and reports how many seats are
left afterwards. Nothing is sent to the backend: the count is computed
from the cached availability and every local pending order, so it may
go negative. The checkout gate makes the final call.
"""

from __future__ import annotations

from boxoffice.application.dto import AddTicketResult, format_remaining
from boxoffice.application.session import PosSession
from boxoffice.application.show_order import to_order_dto
from boxoffice.domain.exceptions import EntityNotFoundError
from boxoffice.domain.model.value_objects import Money, Unbounded


class AddTicketHandler:

    def __init__(self, session: PosSession) -> None:
        self._session = session

    def handle(
        self,
        ticket_id: int,
        quantity: int = 1,
        price: str | None = None,
    ) -> AddTicketResult:
        """Add *quantity* of a ticket to the active order.

        Steps:
        1. Resolve the ticket, its event and its product (fail if not loaded).
        2. Bind a line at the ticket price, or at *price* if given.
        3. Let the order merge it into its last line when allowed.
        4. Persist and report the remaining seats.
        """
        session = self._session
        ticket = session.cache.get_ticket(ticket_id)
        if ticket is None:
            raise EntityNotFoundError(f"Ticket #{ticket_id} not found")
        if session.cache.get_event(ticket.event_id) is None:
            raise EntityNotFoundError(f"Event of ticket '{ticket.label}' is not loaded")
        product = session.products.get_by_id(ticket.product_id)  # type: ignore[arg-type]
        if product is None:
            raise EntityNotFoundError(
                f"Product of ticket '{ticket.label}' is not loaded"
            )

        override = Money.of(price, ticket.price.currency) if price is not None else None
        line = session.reservation.bind(ticket, product, quantity, price=override)

        order = session.active_order()
        order.add_line(line)
        session.orders.save(order)

        remaining = session.accountant.effective_remaining(ticket, session.draft_orders(order))
        return AddTicketResult(
            order=to_order_dto(order),
            ticket_name=ticket.label,
            remaining=format_remaining(remaining),
            overcommitted=not isinstance(remaining, Unbounded) and remaining < 0,
        )
