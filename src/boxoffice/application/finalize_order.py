"""Application service: Finalize Order use case.

Runs the checkout gate on the active order and, if it passes, marks the
order as paid. A paid order keeps holding its seats locally until it is
synced to the backend.
"""

from __future__ import annotations

from boxoffice.application.checkout_gate import CheckoutGate
from boxoffice.application.dto import OrderDTO
from boxoffice.application.session import PosSession
from boxoffice.application.show_order import to_order_dto
from boxoffice.domain.exceptions import CheckoutRejectedError, ValidationError


class FinalizeOrderHandler:

    def __init__(self, session: PosSession) -> None:
        self._session = session

    async def handle(self) -> OrderDTO:
        order = self._session.active_order()
        if not order.lines:
            raise ValidationError("Order must contain at least one line")

        # Check availability first (the gate reconciles with the backend)
        outcome = await CheckoutGate(self._session).check(order)
        if outcome.rejection is not None:
            raise CheckoutRejectedError(outcome.rejection)

        # Then transition the order
        order.mark_paid()
        self._session.orders.save(order)
        return to_order_dto(order)
