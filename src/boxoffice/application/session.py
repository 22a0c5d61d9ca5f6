"""The point-of-sale session.

A session owns one inventory cache for its whole lifetime and hands it to
the services that need it. Nothing else holds a cache; when the session
ends the cache goes with it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from boxoffice.application.dto import CatalogSummary
from boxoffice.application.reconcile_availability import ReconciliationService
from boxoffice.domain.model.inventory import InventoryCache
from boxoffice.domain.model.order import Order
from boxoffice.domain.repository.event_backend import EventBackend
from boxoffice.domain.repository.order_repository import DraftOrderRepository
from boxoffice.domain.repository.product_repository import ProductRepository
from boxoffice.domain.service.availability_accountant import AvailabilityAccountant
from boxoffice.domain.service.line_reservation import LineReservation


@dataclass
class PosSession:
    backend: EventBackend
    orders: DraftOrderRepository
    products: ProductRepository
    cache: InventoryCache = field(default_factory=InventoryCache)
    currency_decimals: int = 2
    reconciliation_timeout: float | None = 5.0
    # What the catalog load brought in; None until it has run
    catalog: CatalogSummary | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.accountant = AvailabilityAccountant(self.cache)
        self.reservation = LineReservation(self.cache, self.currency_decimals)
        self.reconciliation = ReconciliationService(
            self.cache, self.backend, default_timeout=self.reconciliation_timeout
        )

    def adopt(self, order: Order) -> Order:
        """Wire the session's merge and pricing rules into *order*."""
        order.merge_policy = self.reservation.merge_policy
        if order.lines:
            order.refresh_prices(self.reservation.pricing)
        return order

    def active_order(self) -> Order:
        """Return the open draft order, starting a new one if there is none."""
        order = self.orders.active()
        if order is None:
            order = Order(id=None)
            self.orders.save(order)
        return self.adopt(order)

    def draft_orders(self, active: Order | None = None) -> list[Order]:
        """Every order holding seats: the stored pending ones, then *active*.

        *active* replaces its stored copy, so unsaved edits count too.
        """
        pending = self.orders.list_pending()
        if active is None:
            return pending
        return [*(o for o in pending if o.id != active.id), active]
