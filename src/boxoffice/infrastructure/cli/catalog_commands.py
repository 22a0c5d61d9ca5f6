"""CLI commands for the event catalog and seat availability."""

from __future__ import annotations

import asyncio

import click

from boxoffice.application.dto import CatalogSummary, EventAvailabilityDTO
from boxoffice.application.show_availability import ShowAvailabilityHandler
from boxoffice.domain.exceptions import DomainException
from boxoffice.infrastructure import bootstrap


@click.command("catalog")
def catalog_load() -> None:
    """Load the sellable events and tickets and summarize them."""

    async def run() -> CatalogSummary | None:
        config = bootstrap.settings()
        async with bootstrap.open_session(config) as session:
            return session.catalog

    try:
        summary = asyncio.run(run())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"{summary.events} event(s), {summary.tickets} ticket(s), "
        f"{summary.products} product(s) available for sale"
    )


@click.command("events")
@click.option("--product", "product_id", type=int, default=None, help="Only events sold as this product.")
@click.option("--refresh/--no-refresh", default=True, help="Reconcile seat counts with the backend first.")
def events_list(product_id: int | None, refresh: bool) -> None:
    """Show events, their tickets and the seats left."""

    async def run() -> list[EventAvailabilityDTO]:
        config = bootstrap.settings()
        async with bootstrap.open_session(config) as session:
            handler = ShowAvailabilityHandler(session)
            return await handler.handle(product_id=product_id, refresh=refresh)

    try:
        events = asyncio.run(run())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not events:
        click.echo("No events available.")
        return

    for event in events:
        click.echo(f"#{event.event_id} {event.name}  {event.date_begin}")
        click.echo(f"  {'Ticket':<6} {'Name':<24} {'Price':>10} {'Seats left':>12}")
        click.echo(f"  {'-'*55}")
        for ticket in event.tickets:
            click.echo(
                f"  {ticket.ticket_id:<6} {ticket.name:<24} {ticket.price:>10} {ticket.remaining:>12}"
            )
        click.echo()
