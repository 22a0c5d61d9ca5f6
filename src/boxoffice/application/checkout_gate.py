"""Application service: Checkout Gate.

Last check before an order is finalized. Local counts may be stale, so
every limited ticket on the order is re-checked against fresh server
counts plus all local pending orders.

State machine::

    IDLE -> RECONCILING -> ACCEPTED
                        -> REJECTED_UNAVAILABLE
                        -> REJECTED_NETWORK_ERROR

An order with no limited tickets goes straight from IDLE to ACCEPTED
without a network call. All three outcomes are terminal; ``check`` again
to retry.
"""

from __future__ import annotations

from loguru import logger

from boxoffice.application.dto import CheckoutOutcome, GateState
from boxoffice.application.session import PosSession
from boxoffice.domain.exceptions import ReconciliationError
from boxoffice.domain.model.checkout import CheckoutRejection, RejectionKind
from boxoffice.domain.model.order import Order
from boxoffice.domain.model.ticket import Ticket
from boxoffice.domain.model.value_objects import Unbounded

NETWORK_ERROR_MESSAGE = (
    "Unable to check event tickets availability. "
    "Please check your internet connection"
)


class CheckoutGate:

    def __init__(self, session: PosSession) -> None:
        self._session = session
        self.state = GateState.IDLE

    async def check(self, order: Order) -> CheckoutOutcome:
        self.state = GateState.IDLE

        accountant = self._session.accountant
        limited = [t for t in self._distinct_tickets(order) if not accountant.is_unbounded(t)]
        if not limited:
            return self._finish(GateState.ACCEPTED)

        event_ids = list(dict.fromkeys(t.event_id for t in limited if t.event_id is not None))
        self.state = GateState.RECONCILING
        try:
            await self._session.reconciliation.refresh(event_ids, silent=False)
        except ReconciliationError as exc:
            return self._finish(
                GateState.REJECTED_NETWORK_ERROR,
                CheckoutRejection(
                    kind=RejectionKind.RECONCILIATION_FAILED,
                    message=NETWORK_ERROR_MESSAGE,
                    cause=exc.cause or exc,
                ),
            )

        drafts = self._session.draft_orders(order)
        for ticket in limited:
            event = self._session.cache.get_event(ticket.event_id)
            if event is None:
                # The backend no longer knows the event: nothing can be sold for it.
                return self._unavailable(ticket, f"Event #{ticket.event_id}")

            remaining = accountant.effective_remaining(ticket, drafts)
            if not isinstance(remaining, Unbounded) and remaining < 0:
                return self._unavailable(ticket, event.label)

        return self._finish(GateState.ACCEPTED)

    # --- Internal helpers -----------------------------------------------------

    def _distinct_tickets(self, order: Order) -> list[Ticket]:
        """Tickets referenced by *order*, in line order, without repeats."""
        tickets: list[Ticket] = []
        ticket_ids = [line.ticket_id for line in order.lines if line.ticket_id is not None]
        for ticket_id in dict.fromkeys(ticket_ids):
            ticket = self._session.cache.get_ticket(ticket_id)
            if ticket is None:
                logger.warning("Ticket #{} is not loaded; skipping its availability check", ticket_id)
                continue
            tickets.append(ticket)
        return tickets

    def _unavailable(self, ticket: Ticket, event_label: str) -> CheckoutOutcome:
        return self._finish(
            GateState.REJECTED_UNAVAILABLE,
            CheckoutRejection(
                kind=RejectionKind.UNAVAILABLE_SEATS,
                message=f"Not enough available seats for ticket {ticket.label} ({event_label})",
                ticket=ticket,
            ),
        )

    def _finish(
        self, state: GateState, rejection: CheckoutRejection | None = None
    ) -> CheckoutOutcome:
        self.state = state
        if rejection is None:
            logger.info("Checkout gate: {}", state.value)
        else:
            logger.warning("Checkout gate: {}: {}", state.value, rejection.message)
        return CheckoutOutcome(state=state, rejection=rejection)
