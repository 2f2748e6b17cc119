"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from hostelmart.application.show_store import ShowStoreHandler
from hostelmart.application.update_order_status import (
    ACTION_ACCEPT,
    ACTION_CANCEL,
    UpdateOrderStatusHandler,
)
from hostelmart.domain.exceptions import DomainException
from hostelmart.domain.model.order import Order
from hostelmart.infrastructure.bootstrap import Settings, store_repository


def _display_order(order: Order) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{order.id}  (status={order.status.value})")
    click.echo(f"Customer: {order.customer_name}, room {order.room} ({order.hostel})")
    click.echo(f"Mode:     {order.mode.value}, collect from {order.collect_from_room}")
    click.echo(f"Created:  {order.time_label}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in order.items:
        click.echo(
            f"  {item.name:<20} {item.quantity:>5} {str(item.sell_price):>10} {str(item.line_total):>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Delivery':<27} {str(order.delivery_charge):>20}")
    click.echo(f"  {'Order Total':<27} {str(order.total):>20}")


@click.command("list")
def order_list() -> None:
    """List every order, newest last."""
    orders = ShowStoreHandler(store_repository(Settings.from_env())).orders()
    if not orders:
        click.echo("No orders yet.")
        return

    click.echo(f"{'ID':<15} {'Customer':<16} {'Room':>5} {'Status':<20} {'Total':>10}")
    click.echo("-" * 70)
    for o in orders:
        click.echo(
            f"{o.id:<15} {o.customer_name:<16} {o.room:>5} {o.status.value:<20} {str(o.total):>10}"
        )


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowStoreHandler(store_repository(Settings.from_env()))

    try:
        order = handler.order(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(order)


def _update_status(order_id: int, action: str) -> Order:
    handler = UpdateOrderStatusHandler(store_repository(Settings.from_env()))
    try:
        return handler.handle(order_id, action)
    except DomainException as exc:
        raise click.ClickException(str(exc))


@click.command("accept")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to accept.")
def order_accept(order_id: int) -> None:
    """Accept an order."""
    _update_status(order_id, ACTION_ACCEPT)
    click.echo(f"Order #{order_id} accepted.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
def order_cancel(order_id: int) -> None:
    """Cancel an order as admin (returns its items to stock)."""
    _update_status(order_id, ACTION_CANCEL)
    click.echo(f"Order #{order_id} cancelled, items returned to stock.")
