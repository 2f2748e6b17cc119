"""JSON views of domain objects returned by the HTTP API."""

from __future__ import annotations

from decimal import Decimal

from hostelmart.application.dto import TodayReport
from hostelmart.domain.model.order import Order
from hostelmart.domain.model.value_objects import Money
from hostelmart.domain.service.report_aggregation import (
    CustomerRow,
    DistributorSummary,
)


def number(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def money(value: Money) -> int | float:
    return number(value.amount)


def price_map(prices: dict[str, Money]) -> dict[str, int | float]:
    return {name: money(price) for name, price in prices.items()}


def _iso(moment) -> str | None:
    return moment.isoformat() if moment is not None else None


def order_json(order: Order) -> dict:
    return {
        "id": order.id,
        "name": order.customer_name,
        "room": order.room,
        "hostel": order.hostel,
        "mode": order.mode.value,
        "items": [
            {
                "name": item.name,
                "qty": item.quantity,
                "price": money(item.sell_price),
                "sellPriceAtOrder": money(item.sell_price),
                "buyPriceAtOrder": money(item.buy_price),
            }
            for item in order.items
        ],
        "deliveryCharge": money(order.delivery_charge),
        "total": money(order.total),
        "profit": number(order.profit),
        "status": order.status.value,
        "time": order.time_label,
        "createdAt": order.created_at.isoformat(),
        "acceptedAt": _iso(order.accepted_at),
        "cancelledAt": _iso(order.cancelled_at),
        "adjustedAt": _iso(order.adjusted_at),
        "collectFromRoom": order.collect_from_room,
        "excludeFromCustomerStats": order.exclude_from_customer_stats,
        "excludeFromProfitStats": order.exclude_from_profit_stats,
    }


def today_report_json(report: TodayReport) -> dict:
    return {
        "date": report.day.isoformat(),
        "ordersCount": report.today.orders_count,
        "revenue": money(report.today.revenue),
        "profit": number(report.today.profit),
        "items": dict(report.today.items),
        "month": str(report.month),
        "monthOrdersCount": report.month_totals.orders_count,
        "monthRevenue": money(report.month_totals.revenue),
        "monthProfit": number(report.month_totals.profit),
    }


def customer_row_json(row: CustomerRow) -> dict:
    return {
        "key": row.key,
        "name": row.name,
        "room": row.room,
        "totalSpent": money(row.total_spent),
        "ordersCount": row.orders_count,
        "manual": row.manual,
    }


def distributor_summary_json(summary: DistributorSummary) -> dict:
    return {
        "orders": summary.orders_count,
        "amount": money(summary.amount),
        "items": dict(summary.items),
    }
