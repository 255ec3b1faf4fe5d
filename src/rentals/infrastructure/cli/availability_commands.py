"""CLI commands for availability queries."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import click

from rentals.application.check_availability import CheckAvailabilityHandler
from rentals.application.show_calendar import ShowCalendarHandler
from rentals.domain.exceptions import DomainException
from rentals.domain.model.availability import FailureReason
from rentals.infrastructure.bootstrap import product_repository, reservation_repository

ISO_DATE = click.DateTime(formats=["%Y-%m-%d"])


@click.command("check")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--start", required=True, type=ISO_DATE, help="First rental day (YYYY-MM-DD).")
@click.option("--end", required=True, type=ISO_DATE, help="Last rental day (YYYY-MM-DD).")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units wanted.")
@click.option("--exclude-order", default=None, help="Ignore reservations of this order.")
@click.pass_context
def availability_check(
    ctx: click.Context,
    product_id: str,
    start: datetime,
    end: datetime,
    quantity: int,
    exclude_order: str | None,
) -> None:
    """Check whether units are free for a date range.

    Exits with status 1 when the request cannot be satisfied.
    """
    try:
        handler = CheckAvailabilityHandler(
            product_repo=product_repository(ctx.obj),
            reservation_repo=reservation_repository(ctx.obj),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    result = handler.handle(
        product_id, start.date(), end.date(), quantity, exclude_order_id=exclude_order
    )

    click.echo(f"Product:   {product_id}")
    click.echo(f"Period:    {start.date()} .. {end.date()}")
    click.echo(f"Total:     {result.total_quantity}")
    click.echo(f"Reserved:  {result.reserved_quantity}")
    click.echo(f"Available: {result.available_quantity}")

    if result.available:
        click.echo(f"OK: {quantity} unit(s) can be rented.")
        return

    click.echo(f"Unavailable: {result.message}", err=True)
    if result.reason is FailureReason.INSUFFICIENT_CAPACITY:
        click.echo(f"Short by:  {result.shortfall(quantity)}", err=True)
    ctx.exit(1)


@click.command("calendar")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--year", required=True, type=int, help="Calendar year.")
@click.option("--month", required=True, type=click.IntRange(1, 12), help="Month (1-12).")
@click.pass_obj
def availability_calendar(data_dir: Path, product_id: str, year: int, month: int) -> None:
    """Show free units for every day of a month."""
    try:
        handler = ShowCalendarHandler(
            product_repo=product_repository(data_dir),
            reservation_repo=reservation_repository(data_dir),
        )
        days = handler.handle(product_id, year, month)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{'Date':<12} {'Available':>10}")
    click.echo("-" * 23)
    for day in days:
        click.echo(f"{day.date.isoformat():<12} {day.available_quantity:>10}")
