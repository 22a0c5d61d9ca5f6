"""Unit tests for the AvailabilityAccountant domain service."""

import pytest

from boxoffice.domain.exceptions import EntityNotFoundError
from boxoffice.domain.model.inventory import InventoryCache
from boxoffice.domain.model.order import Order, OrderLine
from boxoffice.domain.model.value_objects import UNBOUNDED, Money, Quantity
from boxoffice.domain.service.availability_accountant import AvailabilityAccountant


def _limited(available: int, max_seats: int | None = None) -> dict:
    return {
        "seats_availability": "limited",
        "seats_max": available if max_seats is None else max_seats,
        "seats_available": available,
    }


UNLIMITED = {"seats_availability": "unlimited"}


def _cache(event_seats: dict, tickets: dict[int, dict]) -> InventoryCache:
    """One event (#1) with the given tickets {ticket_id: seat fields}."""
    cache = InventoryCache()
    cache.upsert_events([{"id": 1, "name": "Gala", **event_seats}])
    cache.upsert_tickets(
        [
            {"id": tid, "event_id": 1, "product_id": 50, "price": 10.0, **seats}
            for tid, seats in tickets.items()
        ]
    )
    return cache


def _order(order_id: int, *reservations: tuple[int | None, int]) -> Order:
    """Order with (ticket_id, qty) lines."""
    return Order(
        id=order_id,
        lines=[
            OrderLine(
                product_id=50,
                product_name="Registration",
                quantity=Quantity(qty),
                unit_price=Money.of("10.00"),
                ticket_id=ticket_id,
            )
            for ticket_id, qty in reservations
        ],
    )


class TestReservations:

    def test_reserved_by_ticket_sums_across_orders(self):
        cache = _cache(UNLIMITED, {10: UNLIMITED, 11: UNLIMITED})
        accountant = AvailabilityAccountant(cache)
        orders = [_order(1, (10, 2), (11, 1)), _order(2, (10, 3), (None, 7))]

        assert accountant.reserved_by_ticket(orders) == {10: 5, 11: 1}

    def test_reserved_by_event_rolls_up(self):
        cache = _cache(UNLIMITED, {10: UNLIMITED, 11: UNLIMITED})
        accountant = AvailabilityAccountant(cache)

        assert accountant.reserved_by_event({10: 5, 11: 1, 99: 4}) == {1: 6}


class TestEffectiveRemaining:

    def test_unbounded_on_both_sides_ignores_volume(self):
        cache = _cache(UNLIMITED, {10: UNLIMITED})
        accountant = AvailabilityAccountant(cache)
        orders = [_order(1, (10, 10_000)), _order(2, (10, 50_000))]

        assert accountant.effective_remaining(cache.get_ticket(10), orders) is UNBOUNDED

    def test_no_reservations(self):
        cache = _cache(UNLIMITED, {10: _limited(10)})
        accountant = AvailabilityAccountant(cache)

        assert accountant.effective_remaining(cache.get_ticket(10), []) == 10

    def test_reservations_across_two_orders(self):
        cache = _cache(UNLIMITED, {10: _limited(10)})
        accountant = AvailabilityAccountant(cache)
        orders = [_order(1, (10, 4)), _order(2, (10, 3))]

        assert accountant.effective_remaining(cache.get_ticket(10), orders) == 3

    def test_event_cap_dominates(self):
        cache = _cache(_limited(5), {10: _limited(10), 11: _limited(10)})
        accountant = AvailabilityAccountant(cache)
        orders = [_order(1, (10, 4)), _order(2, (11, 3))]

        assert accountant.effective_remaining(cache.get_ticket(10), orders) <= -2
        assert accountant.effective_remaining(cache.get_ticket(11), orders) <= -2

    def test_bounded_event_caps_unbounded_ticket(self):
        cache = _cache(_limited(5), {10: UNLIMITED})
        accountant = AvailabilityAccountant(cache)

        assert accountant.effective_remaining(cache.get_ticket(10), [_order(1, (10, 2))]) == 3

    def test_ticket_and_event_remaining_separately(self):
        cache = _cache(_limited(8), {10: _limited(6), 11: UNLIMITED})
        accountant = AvailabilityAccountant(cache)
        orders = [_order(1, (10, 2), (11, 5))]
        ticket = cache.get_ticket(10)

        assert accountant.ticket_remaining(ticket, orders) == 4
        assert accountant.event_remaining(ticket, orders) == 1
        assert accountant.ticket_remaining(cache.get_ticket(11), orders) is UNBOUNDED

    def test_accepts_a_generator_of_orders(self):
        cache = _cache(_limited(5), {10: _limited(10)})
        accountant = AvailabilityAccountant(cache)
        orders = (o for o in [_order(1, (10, 1)), _order(2, (10, 1))])

        assert accountant.effective_remaining(cache.get_ticket(10), orders) == 3

    def test_never_mutates_the_cache(self):
        cache = _cache(_limited(5), {10: _limited(10)})
        accountant = AvailabilityAccountant(cache)
        accountant.effective_remaining(cache.get_ticket(10), [_order(1, (10, 9))])

        assert cache.get_ticket(10).capacity.available == 10
        assert cache.get_event(1).capacity.available == 5

    def test_unresolved_event_rejected(self):
        cache = InventoryCache()
        cache.upsert_tickets([{"id": 10, "event_id": 7, "product_id": 50}])
        accountant = AvailabilityAccountant(cache)

        with pytest.raises(EntityNotFoundError, match="not loaded"):
            accountant.effective_remaining(cache.get_ticket(10), [])
        assert not accountant.is_unbounded(cache.get_ticket(10))
