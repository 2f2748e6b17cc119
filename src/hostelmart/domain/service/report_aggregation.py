"""Domain service: Report Aggregation.

Pure read-side folds over the order log. Nothing here mutates state.
Cancelled orders never count towards any report.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from hostelmart.domain.model.distributor import BUCKETS
from hostelmart.domain.model.ledger import ManualLedgerEntry, customer_key
from hostelmart.domain.model.order import Order
from hostelmart.domain.model.value_objects import Money, Month

TOP_CUSTOMERS_LIMIT = 3


@dataclass
class SalesTotals:
    orders_count: int = 0
    revenue: Money = field(default_factory=Money.zero)
    profit: Decimal = Decimal("0")
    items: dict[str, int] = field(default_factory=dict)

    def add(self, order: Order) -> None:
        self.orders_count += 1
        self.revenue = self.revenue + order.total
        self.profit += order.reported_profit
        for line in order.items:
            self.items[line.name] = self.items.get(line.name, 0) + line.quantity


@dataclass(frozen=True)
class CustomerRow:
    key: str
    name: str
    room: str
    total_spent: Money
    orders_count: int
    manual: bool = False


@dataclass
class DistributorSummary:
    bucket: str
    orders_count: int = 0
    amount: Money = field(default_factory=Money.zero)
    items: dict[str, int] = field(default_factory=dict)


def live_orders(orders: Iterable[Order]) -> list[Order]:
    return [order for order in orders if not order.is_cancelled]


def sales_for_day(orders: Iterable[Order], day: date) -> SalesTotals:
    totals = SalesTotals()
    for order in live_orders(orders):
        if order.created_at.date() == day:
            totals.add(order)
    return totals


def sales_for_month(orders: Iterable[Order], month: Month) -> SalesTotals:
    totals = SalesTotals()
    for order in live_orders(orders):
        if month.contains(order.created_at):
            totals.add(order)
    return totals


def customer_spend(
    orders: Iterable[Order],
    month: Month | None,
    overrides: dict[str, ManualLedgerEntry],
) -> list[CustomerRow]:
    """Group spend by ``name|room``, then let manual entries replace rows.

    *month* of None means the lifetime report. Rows are sorted by spend,
    highest first.
    """
    grouped: dict[str, CustomerRow] = {}
    for order in live_orders(orders):
        if order.exclude_from_customer_stats:
            continue
        if month is not None and not month.contains(order.created_at):
            continue
        key = customer_key(order.customer_name, order.room)
        row = grouped.get(key)
        if row is None:
            grouped[key] = CustomerRow(
                key=key,
                name=order.customer_name,
                room=order.room,
                total_spent=order.total,
                orders_count=1,
            )
        else:
            grouped[key] = CustomerRow(
                key=key,
                name=row.name,
                room=row.room,
                total_spent=row.total_spent + order.total,
                orders_count=row.orders_count + 1,
            )

    for key, entry in overrides.items():
        grouped[key] = CustomerRow(
            key=key,
            name=entry.name,
            room=entry.room,
            total_spent=entry.total_spent,
            orders_count=entry.orders_count,
            manual=True,
        )

    return sorted(
        grouped.values(),
        key=lambda row: (-row.total_spent.amount, -row.orders_count, row.key),
    )


def distributor_month_summary(
    orders: Iterable[Order], month: Month
) -> dict[str, DistributorSummary]:
    summaries = {bucket: DistributorSummary(bucket) for bucket in BUCKETS}
    for order in live_orders(orders):
        if not month.contains(order.created_at):
            continue
        summary = summaries.get(order.collect_from_room)
        if summary is None:
            continue
        summary.orders_count += 1
        summary.amount = summary.amount + order.total
        for line in order.items:
            summary.items[line.name] = summary.items.get(line.name, 0) + line.quantity
    return summaries
