import logging

import click

from hostelmart.infrastructure.bootstrap import (
    Settings,
    order_notifier,
    store_repository,
)
from hostelmart.infrastructure.cli.order_commands import (
    order_accept,
    order_cancel,
    order_list,
    order_show,
)
from hostelmart.infrastructure.cli.report_commands import (
    report_customers,
    report_distributors,
    report_today,
)
from hostelmart.infrastructure.cli.stock_commands import stock_set, stock_show
from hostelmart.infrastructure.web.app import create_app


@click.group()
def cli() -> None:
    """Hostelmart: campus store ordering backend"""


@cli.command("serve")
@click.option("--host", default=None, help="Interface to bind (default from HOSTELMART_HOST).")
@click.option("--port", default=None, type=int, help="Port to listen on (default from PORT).")
def serve(host: str | None, port: int | None) -> None:
    """Run the HTTP API."""
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    repo = store_repository(settings)
    app = create_app(
        repo,
        admin_password=settings.admin_password,
        vapid_public_key=settings.vapid_public_key,
        notifier=order_notifier(repo, settings),
    )
    app.run(host=host or settings.host, port=port or settings.port)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def stock() -> None:
    """Manage catalog stock."""


@cli.group()
def report() -> None:
    """Sales and customer reports."""


# Register subcommands
order.add_command(order_accept)
order.add_command(order_cancel)
order.add_command(order_list)
order.add_command(order_show)
stock.add_command(stock_set)
stock.add_command(stock_show)
report.add_command(report_customers)
report.add_command(report_distributors)
report.add_command(report_today)
