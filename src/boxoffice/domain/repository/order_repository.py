"""Abstract repository for draft orders.

Holds every order not yet acknowledged by the backend: the active DRAFT
order and the PAID orders waiting to be synced.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from boxoffice.domain.model.order import Order, OrderStatus


class DraftOrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique order ID."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_pending(self) -> list[Order]:
        """Return every DRAFT or PAID order, oldest first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order."""

    def active(self) -> Order | None:
        """Return the newest DRAFT order, or None."""
        drafts = [o for o in self.list_pending() if o.status == OrderStatus.DRAFT]
        return drafts[-1] if drafts else None
