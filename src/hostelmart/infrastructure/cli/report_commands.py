"""CLI commands for reports."""

from __future__ import annotations

import click

from hostelmart.application.show_reports import (
    ShowCustomerReportHandler,
    ShowDistributorSummaryHandler,
    ShowTodayReportHandler,
)
from hostelmart.infrastructure.bootstrap import Settings, store_repository


@click.command("today")
def report_today() -> None:
    """Today's sales plus the running month totals."""
    report = ShowTodayReportHandler(store_repository(Settings.from_env())).handle()

    click.echo(f"Sales for {report.day.isoformat()}")
    click.echo(f"  Orders:  {report.today.orders_count}")
    click.echo(f"  Revenue: {report.today.revenue}")
    click.echo(f"  Profit:  ₹{report.today.profit:.2f}")
    for name, qty in sorted(report.today.items.items()):
        click.echo(f"    {name:<20} {qty:>5}")
    click.echo(f"Month {report.month}: revenue {report.month_totals.revenue}, "
               f"profit ₹{report.month_totals.profit:.2f}")


@click.command("customers")
@click.option("--month", default=None, help="Month as YYYY-MM (default: current).")
@click.option("--lifetime", is_flag=True, default=False, help="All-time totals.")
def report_customers(month: str | None, lifetime: bool) -> None:
    """Customer spend ranking."""
    handler = ShowCustomerReportHandler(store_repository(Settings.from_env()))
    if lifetime:
        title, rows = "lifetime", handler.lifetime()
    else:
        target, rows = handler.for_month(month)
        title = str(target)

    click.echo(f"Customers ({title})")
    if not rows:
        click.echo("No customers found.")
        return

    click.echo(f"{'Name':<20} {'Room':>6} {'Orders':>7} {'Spent':>12}")
    click.echo("-" * 48)
    for row in rows:
        marker = " *" if row.manual else ""
        click.echo(
            f"{row.name:<20} {row.room:>6} {row.orders_count:>7} {str(row.total_spent):>12}{marker}"
        )


@click.command("distributors")
@click.option("--month", default=None, help="Month as YYYY-MM (default: current).")
def report_distributors(month: str | None) -> None:
    """Orders and items collected from each distributor room."""
    target, summaries = ShowDistributorSummaryHandler(
        store_repository(Settings.from_env())
    ).handle(month)

    click.echo(f"Distributors ({target})")
    for bucket, summary in summaries.items():
        click.echo(f"Room {bucket}: {summary.orders_count} orders, {summary.amount}")
        for name, qty in sorted(summary.items.items()):
            click.echo(f"    {name:<20} {qty:>5}")
