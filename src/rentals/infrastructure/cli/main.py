import logging

import click

from rentals.infrastructure.bootstrap import DATA_DIR_ENV, data_dir
from rentals.infrastructure.cli.availability_commands import (
    availability_calendar,
    availability_check,
)
from rentals.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_set_stock,
)
from rentals.infrastructure.cli.reservation_commands import (
    reservation_cancel,
    reservation_create,
    reservation_list,
)

_LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


@click.group()
@click.option(
    "--data-dir",
    "data_dir_option",
    envvar=DATA_DIR_ENV,
    type=click.Path(file_okay=False),
    default=None,
    help=f"Directory holding the JSON data files (env: {DATA_DIR_ENV}).",
)
@click.option("-v", "--verbose", count=True, help="Log more (-v info, -vv debug).")
@click.pass_context
def cli(ctx: click.Context, data_dir_option: str | None, verbose: int) -> None:
    """Rentals: availability and reservation engine"""
    logging.basicConfig(
        level=_LOG_LEVELS.get(verbose, logging.DEBUG),
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = data_dir(data_dir_option)


@cli.group()
def product() -> None:
    """Manage rentable products."""


@cli.group()
def availability() -> None:
    """Query free stock."""


@cli.group()
def reservation() -> None:
    """Manage reservations."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_set_stock)
availability.add_command(availability_check)
availability.add_command(availability_calendar)
reservation.add_command(reservation_create)
reservation.add_command(reservation_list)
reservation.add_command(reservation_cancel)
