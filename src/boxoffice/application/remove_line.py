"""Application service: Remove Line use case."""

from __future__ import annotations

from boxoffice.application.dto import OrderDTO
from boxoffice.application.show_order import to_order_dto
from boxoffice.domain.exceptions import EntityNotFoundError
from boxoffice.domain.repository.order_repository import DraftOrderRepository


class RemoveLineHandler:

    def __init__(self, order_repo: DraftOrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, line_number: int) -> OrderDTO:
        """Remove line *line_number* (1-based) from the active order."""
        order = self._order_repo.active()
        if order is None:
            raise EntityNotFoundError("No open order")
        order.remove_line(line_number - 1)
        self._order_repo.save(order)
        return to_order_dto(order)
