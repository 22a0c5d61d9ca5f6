"""CLI commands for the open order."""

from __future__ import annotations

import asyncio

import click

from boxoffice.application.add_ticket import AddTicketHandler
from boxoffice.application.dto import AddTicketResult, OrderDTO
from boxoffice.application.finalize_order import FinalizeOrderHandler
from boxoffice.application.remove_line import RemoveLineHandler
from boxoffice.application.show_order import ShowOrderHandler
from boxoffice.domain.exceptions import DomainException
from boxoffice.infrastructure import bootstrap


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'#':>3} {'Product':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*56}")
    for number, line in enumerate(dto.lines, start=1):
        price = f"{line.unit_price}*" if line.price_manually_set else line.unit_price
        click.echo(
            f"  {number:>3} {line.product_name:<24} {line.quantity:>5} {price:>10} {line.line_total:>10}"
        )
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Order Total':<33} {dto.total:>21}")


@click.command("show")
@click.option("--id", "order_id", type=int, default=None, help="Order ID (defaults to the open order).")
def order_show(order_id: int | None) -> None:
    """Show an order."""
    handler = ShowOrderHandler(order_repo=bootstrap.order_repository(bootstrap.settings()))

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("add-ticket")
@click.option("--ticket", "ticket_id", required=True, type=int, help="Ticket ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Number of seats.")
@click.option("--price", default=None, help="Manual unit price (e.g. 15.00).")
def order_add_ticket(ticket_id: int, quantity: int, price: str | None) -> None:
    """Add event tickets to the open order."""

    async def run() -> AddTicketResult:
        config = bootstrap.settings()
        async with bootstrap.open_session(config) as session:
            return AddTicketHandler(session).handle(ticket_id, quantity=quantity, price=price)

    try:
        result = asyncio.run(run())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Added {quantity} x {result.ticket_name} to order #{result.order.id}")
    click.echo(f"Seats left: {result.remaining}")
    if result.overcommitted:
        click.echo("Warning: more seats ordered than available; checkout will be refused.")


@click.command("remove-line")
@click.option("--line", "line_number", required=True, type=int, help="Line number (see 'order show').")
def order_remove_line(line_number: int) -> None:
    """Remove a line from the open order."""
    handler = RemoveLineHandler(order_repo=bootstrap.order_repository(bootstrap.settings()))

    try:
        dto = handler.handle(line_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("checkout")
def order_checkout() -> None:
    """Check seat availability with the backend and finalize the open order."""

    async def run() -> OrderDTO:
        config = bootstrap.settings()
        async with bootstrap.open_session(config) as session:
            return await FinalizeOrderHandler(session).handle()

    try:
        dto = asyncio.run(run())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} paid: {dto.total}, awaiting sync.")
