"""CLI commands for the Reservation aggregate."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import click

from rentals.application.cancel_order_reservations import CancelOrderReservationsHandler
from rentals.application.create_reservation import CreateReservationHandler
from rentals.application.dto import ReservationDTO
from rentals.application.list_reservations import ListReservationsHandler
from rentals.domain.exceptions import DomainException
from rentals.domain.model.outcomes import ReservationRequest
from rentals.infrastructure.bootstrap import product_repository, reservation_repository
from rentals.infrastructure.cli.availability_commands import ISO_DATE


def _display_reservations(reservations: list[ReservationDTO]) -> None:
    """Shared formatting for reservation tables."""
    click.echo(
        f"  {'ID':>4} {'Product':<10} {'Qty':>4} {'Start':<10} {'End':<10} "
        f"{'Order':<10} {'Status':<8}"
    )
    click.echo(f"  {'-'*62}")
    for r in reservations:
        owner = r.order_id or (f"Q:{r.quotation_id}" if r.quotation_id else "-")
        click.echo(
            f"  {r.id:>4} {r.product_id:<10} {r.quantity:>4} {r.start_date:<10} "
            f"{r.end_date:<10} {owner:<10} {r.status:<8}"
        )


@click.command("create")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units to hold.")
@click.option("--start", required=True, type=ISO_DATE, help="First rental day (YYYY-MM-DD).")
@click.option("--end", required=True, type=ISO_DATE, help="Last rental day (YYYY-MM-DD).")
@click.option("--order", "order_id", default=None, help="Owning order ID.")
@click.option("--quotation", "quotation_id", default=None, help="Owning quotation ID.")
@click.option("--variant", "variant_id", default=None, help="Product variant ID.")
@click.option("--force", is_flag=True, default=False, help="Skip the capacity check.")
@click.pass_obj
def reservation_create(
    data_dir: Path,
    product_id: str,
    quantity: int,
    start: datetime,
    end: datetime,
    order_id: str | None,
    quotation_id: str | None,
    variant_id: str | None,
    force: bool,
) -> None:
    """Hold units of a product for a date range."""
    request = ReservationRequest(
        product_id=product_id,
        quantity=quantity,
        start_date=start.date(),
        end_date=end.date(),
        variant_id=variant_id,
        order_id=order_id,
        quotation_id=quotation_id,
    )

    try:
        handler = CreateReservationHandler(
            product_repo=product_repository(data_dir),
            reservation_repo=reservation_repository(data_dir),
        )
        dto = handler.handle(request, atomic=not force)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Reservation #{dto.id} created: {dto.quantity} x {dto.product_id} "
        f"from {dto.start_date} to {dto.end_date}"
    )


@click.command("list")
@click.option("--product", "product_id", default=None, help="Product ID.")
@click.option("--start", type=ISO_DATE, default=None, help="Range start (with --product).")
@click.option("--end", type=ISO_DATE, default=None, help="Range end (with --product).")
@click.option("--order", "order_id", default=None, help="List every reservation of an order.")
@click.pass_obj
def reservation_list(
    data_dir: Path,
    product_id: str | None,
    start: datetime | None,
    end: datetime | None,
    order_id: str | None,
) -> None:
    """List active reservations of a product, or all reservations of an order."""
    if bool(order_id) == bool(product_id):
        raise click.UsageError("Pass exactly one of --product or --order.")
    if product_id and (start is None or end is None):
        raise click.UsageError("--product requires --start and --end.")

    try:
        handler = ListReservationsHandler(
            product_repo=product_repository(data_dir),
            reservation_repo=reservation_repository(data_dir),
        )
        if order_id:
            reservations = handler.for_order(order_id)
        else:
            reservations = handler.for_product(product_id, start.date(), end.date())  # type: ignore[arg-type, union-attr]
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not reservations:
        click.echo("No reservations found.")
        return

    _display_reservations(reservations)


@click.command("cancel")
@click.option("--order", "order_id", required=True, help="Order whose reservations to release.")
@click.pass_obj
def reservation_cancel(data_dir: Path, order_id: str) -> None:
    """Release every reservation of a cancelled or refunded order."""
    try:
        handler = CancelOrderReservationsHandler(
            product_repo=product_repository(data_dir),
            reservation_repo=reservation_repository(data_dir),
        )
        released = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if released:
        click.echo(f"Released {released} reservation(s) for order {order_id}.")
    else:
        click.echo(f"No active reservations for order {order_id}.")
