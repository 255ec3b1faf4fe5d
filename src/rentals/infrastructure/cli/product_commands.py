"""CLI commands for the Product catalog."""

from __future__ import annotations

from pathlib import Path

import click

from rentals.application.add_product import AddProductHandler
from rentals.application.set_stock import SetStockHandler
from rentals.domain.exceptions import DomainException
from rentals.infrastructure.bootstrap import product_repository


@click.command("add")
@click.option("--id", "product_id", default=None, help="Product ID (auto-assigned if omitted).")
@click.option("--name", required=True, help="Product name.")
@click.option("--quantity", required=True, type=int, help="Total units owned.")
@click.pass_obj
def product_add(data_dir: Path, product_id: str | None, name: str, quantity: int) -> None:
    """Add a new rentable product."""
    try:
        handler = AddProductHandler(product_repo=product_repository(data_dir))
        product = handler.handle(name=name, quantity=quantity, product_id=product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added with {product.quantity} unit(s)")


@click.command("list")
@click.pass_obj
def product_list(data_dir: Path) -> None:
    """List all products in the catalog."""
    try:
        products = product_repository(data_dir).list_all()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Stock':>8}")
    click.echo("-" * 36)
    for p in products:
        click.echo(f"{p.id:<6} {p.name:<20} {p.quantity:>8}")


@click.command("set-stock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="New total units owned.")
@click.pass_obj
def product_set_stock(data_dir: Path, product_id: str, quantity: int) -> None:
    """Set the total stock of a product."""
    try:
        handler = SetStockHandler(product_repo=product_repository(data_dir))
        handler.handle(product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for product #{product_id} set to {quantity}")
