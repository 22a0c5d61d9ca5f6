"""Application service: Show Availability use case (query).

Lists every loaded event with its tickets and the seats left for each,
counting the reservations of all local pending orders. With ``refresh``
the counts are first reconciled with the backend; if that fails the
cached counts are shown anyway, since this is only feedback and the
checkout gate enforces the real limit.
"""

from __future__ import annotations

from loguru import logger

from boxoffice.application.dto import (
    EventAvailabilityDTO,
    TicketAvailabilityDTO,
    format_remaining,
)
from boxoffice.application.session import PosSession
from boxoffice.domain.exceptions import ReconciliationError


class ShowAvailabilityHandler:

    def __init__(self, session: PosSession) -> None:
        self._session = session

    async def handle(
        self, product_id: int | None = None, refresh: bool = False
    ) -> list[EventAvailabilityDTO]:
        cache = self._session.cache
        if product_id is None:
            events = cache.events()
        else:
            events = cache.events_for_product(product_id)

        if refresh and events:
            try:
                await self._session.reconciliation.refresh(
                    [e.id for e in events], silent=True
                )
            except ReconciliationError as exc:
                logger.warning("Showing cached availability: {}", exc)

        drafts = self._session.draft_orders()
        accountant = self._session.accountant
        return [
            EventAvailabilityDTO(
                event_id=event.id,
                name=event.label,
                date_begin=event.date_begin.strftime("%Y-%m-%d %H:%M") if event.date_begin else "",
                tickets=[
                    TicketAvailabilityDTO(
                        ticket_id=ticket.id,
                        name=ticket.label,
                        price=str(ticket.price),
                        remaining=format_remaining(accountant.effective_remaining(ticket, drafts)),
                    )
                    for ticket in cache.tickets_for_event(event.id)
                    if product_id is None or ticket.product_id == product_id
                ],
            )
            for event in events
        ]
