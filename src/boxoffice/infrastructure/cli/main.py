import click

from boxoffice.infrastructure import bootstrap
from boxoffice.infrastructure.cli.catalog_commands import catalog_load, events_list
from boxoffice.infrastructure.cli.order_commands import (
    order_add_ticket,
    order_checkout,
    order_remove_line,
    order_show,
)
from boxoffice.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Override the configured log level.")
def cli(log_level: str | None) -> None:
    """Box office — event ticket sales at the point of sale"""
    configure_logging(log_level or bootstrap.settings().log_level)


@cli.group()
def order() -> None:
    """Manage the open order."""


# Register subcommands
cli.add_command(catalog_load)
cli.add_command(events_list)
order.add_command(order_add_ticket)
order.add_command(order_checkout)
order.add_command(order_remove_line)
order.add_command(order_show)
