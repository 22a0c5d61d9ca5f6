"""Integration tests for the ShowAvailability use case."""

import pytest

from boxoffice.application.session import PosSession
from boxoffice.application.show_availability import ShowAvailabilityHandler
from boxoffice.domain.model.order import Order, OrderLine
from boxoffice.domain.model.value_objects import Money, Quantity
from boxoffice.domain.repository.event_backend import EVENT_MODEL, TICKET_MODEL
from boxoffice.infrastructure.persistence.memory_product_repository import (
    InMemoryProductRepository,
)
from tests.fakes import FakeDraftOrderRepository, FakeEventBackend, backend_down

pytestmark = pytest.mark.anyio


def _setup(failures: dict | None = None) -> PosSession:
    backend = FakeEventBackend(
        {
            EVENT_MODEL: [{"id": 1, "seats_availability": "limited", "seats_available": 6}],
            TICKET_MODEL: [
                {"id": 10, "event_id": [1, "Gala"], "seats_availability": "limited", "seats_available": 6},
            ],
        },
        failures=failures,
    )
    held = Order(
        id=1,
        lines=[
            OrderLine(
                product_id=50, product_name="Registration", quantity=Quantity(2),
                unit_price=Money.of("25.00"), ticket_id=10,
            )
        ],
    )
    session = PosSession(
        backend=backend,
        orders=FakeDraftOrderRepository([held]),
        products=InMemoryProductRepository(),
    )
    session.cache.upsert_events(
        [
            {"id": 1, "name": "Gala", "date_begin": "2026-05-02 19:00:00",
             "seats_availability": "limited", "seats_max": 10, "seats_available": 10},
            {"id": 2, "name": "Open Day"},
        ]
    )
    session.cache.upsert_tickets(
        [
            {"id": 10, "name": "Standard", "event_id": 1, "product_id": 50, "price": 25.0,
             "seats_availability": "limited", "seats_max": 10, "seats_available": 10},
            {"id": 11, "name": "VIP", "event_id": 1, "product_id": 52, "price": 90.0},
            {"id": 20, "name": "Visitor", "event_id": 2, "product_id": 51, "price": 0.0},
        ]
    )
    return session


class TestShowAvailability:

    async def test_lists_cached_counts_minus_local_orders(self):
        session = _setup()
        events = await ShowAvailabilityHandler(session).handle()

        assert [e.name for e in events] == ["Gala", "Open Day"]
        gala = events[0]
        assert gala.date_begin == "2026-05-02 19:00"
        assert [(t.ticket_id, t.price, t.remaining) for t in gala.tickets] == [
            (10, "$25.00", "8"),
            (11, "$90.00", "8"),
        ]
        assert events[1].tickets[0].remaining == "unlimited"
        assert session.backend.calls == []

    async def test_filter_by_product(self):
        events = await ShowAvailabilityHandler(_setup()).handle(product_id=52)

        assert [e.event_id for e in events] == [1]
        assert [t.ticket_id for t in events[0].tickets] == [11]

    async def test_refresh_reconciles_first(self):
        session = _setup()
        events = await ShowAvailabilityHandler(session).handle(refresh=True)

        assert events[0].tickets[0].remaining == "4"
        assert all(silent for *_, silent in session.backend.calls)

    async def test_refresh_failure_falls_back_to_cache(self):
        session = _setup(failures={EVENT_MODEL: backend_down(), TICKET_MODEL: backend_down()})
        events = await ShowAvailabilityHandler(session).handle(refresh=True)

        assert events[0].tickets[0].remaining == "8"

    async def test_does_not_open_an_order(self):
        session = _setup()
        await ShowAvailabilityHandler(session).handle()

        assert [o.id for o in session.orders.list_pending()] == [1]
