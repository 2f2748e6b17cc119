"""CLI commands for catalog stock."""

from __future__ import annotations

import click

from hostelmart.application.manage_store import SetStockHandler
from hostelmart.application.show_store import ShowStoreHandler
from hostelmart.domain.exceptions import DomainException
from hostelmart.infrastructure.bootstrap import Settings, store_repository


@click.command("set")
@click.option("--product", required=True, help="Product name.")
@click.option("--quantity", required=True, type=int, help="Units in stock.")
def stock_set(product: str, quantity: int) -> None:
    """Set the stock count of one product (other products are kept)."""
    repo = store_repository(Settings.from_env())
    current = ShowStoreHandler(repo).stock()
    current[product] = quantity

    try:
        SetStockHandler(repo).handle(current)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for '{product}' set to {quantity}")


@click.command("show")
def stock_show() -> None:
    """Show stock counts and prices."""
    handler = ShowStoreHandler(store_repository(Settings.from_env()))
    stock = handler.stock()
    sell = handler.sell_prices()
    buy = handler.buy_prices()

    if not stock:
        click.echo("No stock records found.")
        return

    click.echo(f"{'Product':<20} {'Stock':>6} {'Buy':>10} {'Sell':>10}")
    click.echo("-" * 49)
    for name, qty in stock.items():
        buy_price = str(buy[name]) if name in buy else "-"
        sell_price = str(sell[name]) if name in sell else "-"
        click.echo(f"{name:<20} {qty:>6} {buy_price:>10} {sell_price:>10}")
