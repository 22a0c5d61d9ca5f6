"""Application service: Show Order use case (query)."""

from __future__ import annotations

from boxoffice.application.dto import OrderDTO, OrderLineDTO
from boxoffice.domain.exceptions import EntityNotFoundError
from boxoffice.domain.model.order import Order
from boxoffice.domain.repository.order_repository import DraftOrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: DraftOrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int | None = None) -> OrderDTO:
        """Show the given order, or the active draft when no id is given."""
        if order_id is None:
            order = self._order_repo.active()
            if order is None:
                raise EntityNotFoundError("No open order")
        else:
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")
        return to_order_dto(order)


def to_order_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        status=order.status.value,
        lines=[
            OrderLineDTO(
                product_name=line.product_name,
                quantity=line.quantity.value,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
                ticket_id=line.ticket_id,
                price_manually_set=line.price_manually_set,
            )
            for line in order.lines
        ],
        total=str(order.total),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )
