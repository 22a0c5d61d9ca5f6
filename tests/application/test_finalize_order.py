"""Integration tests for the FinalizeOrder use case."""

import pytest

from boxoffice.application.add_ticket import AddTicketHandler
from boxoffice.application.finalize_order import FinalizeOrderHandler
from boxoffice.application.session import PosSession
from boxoffice.domain.exceptions import CheckoutRejectedError, ValidationError
from boxoffice.domain.model.checkout import RejectionKind
from boxoffice.domain.model.order import OrderStatus
from boxoffice.domain.model.product import Product
from boxoffice.domain.model.value_objects import Money
from boxoffice.domain.repository.event_backend import EVENT_MODEL, TICKET_MODEL
from boxoffice.infrastructure.persistence.memory_product_repository import (
    InMemoryProductRepository,
)
from tests.fakes import FakeDraftOrderRepository, FakeEventBackend, backend_down

pytestmark = pytest.mark.anyio


def _setup(server_seats: int = 10, failures: dict | None = None) -> PosSession:
    limited = {"seats_availability": "limited", "seats_available": server_seats}
    backend = FakeEventBackend(
        {
            EVENT_MODEL: [{"id": 1, **limited}],
            TICKET_MODEL: [{"id": 10, "event_id": [1, "Gala"], **limited}],
        },
        failures=failures,
    )
    session = PosSession(
        backend=backend,
        orders=FakeDraftOrderRepository(),
        products=InMemoryProductRepository(
            [Product(id=50, name="Registration", price=Money.of("25.00"))]
        ),
    )
    seats = {"seats_availability": "limited", "seats_max": 10, "seats_available": 10}
    session.cache.upsert_events([{"id": 1, "name": "Gala", **seats}])
    session.cache.upsert_tickets(
        [{"id": 10, "name": "Standard", "event_id": 1, "product_id": 50, "price": 25.0, **seats}]
    )
    return session


class TestFinalizeHappyPath:

    async def test_paid_after_gate_accepts(self):
        session = _setup()
        AddTicketHandler(session).handle(10, quantity=2)

        dto = await FinalizeOrderHandler(session).handle()

        assert dto.status == OrderStatus.PAID.value
        assert dto.total == "$50.00"
        assert session.orders.get_by_id(dto.id).status == OrderStatus.PAID

    async def test_paid_order_still_holds_seats(self):
        session = _setup(server_seats=3)
        AddTicketHandler(session).handle(10, quantity=2)
        await FinalizeOrderHandler(session).handle()

        # The next sale starts a new order and sees the paid one
        result = AddTicketHandler(session).handle(10, quantity=2)
        assert result.overcommitted is True

        with pytest.raises(CheckoutRejectedError):
            await FinalizeOrderHandler(session).handle()


class TestFinalizeRejected:

    async def test_empty_order(self):
        with pytest.raises(ValidationError, match="at least one line"):
            await FinalizeOrderHandler(_setup()).handle()

    async def test_unavailable_seats(self):
        session = _setup(server_seats=1)
        AddTicketHandler(session).handle(10, quantity=2)

        with pytest.raises(CheckoutRejectedError, match="Not enough available seats") as info:
            await FinalizeOrderHandler(session).handle()

        assert info.value.rejection.kind == RejectionKind.UNAVAILABLE_SEATS
        assert session.orders.active().status == OrderStatus.DRAFT

    async def test_network_error(self):
        session = _setup(failures={EVENT_MODEL: backend_down()})
        AddTicketHandler(session).handle(10)

        with pytest.raises(CheckoutRejectedError, match="internet connection") as info:
            await FinalizeOrderHandler(session).handle()

        assert info.value.rejection.kind == RejectionKind.RECONCILIATION_FAILED
        assert session.orders.active() is not None
