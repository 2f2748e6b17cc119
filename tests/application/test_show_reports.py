"""Integration tests for the report queries."""

from datetime import datetime
from decimal import Decimal

from hostelmart.application.dto import OrderItemSpec
from hostelmart.application.manage_customer_spend import SetCustomerSpendHandler
from hostelmart.application.place_order import PlaceOrderHandler
from hostelmart.application.show_reports import (
    ShowCustomerReportHandler,
    ShowDistributorSummaryHandler,
    ShowTodayReportHandler,
)
from hostelmart.application.update_order_status import UpdateOrderStatusHandler
from hostelmart.domain.model.store import StoreState
from hostelmart.domain.model.value_objects import Money, Month
from tests.fakes import IST, FakeStoreRepository, FixedClock


def _order(repo, clock, name, room, qty, mode="pickup") -> int:
    return PlaceOrderHandler(repo, clock=clock).handle(
        name, room, "BH-1", mode, [OrderItemSpec("Maggi", qty)]
    ).order_id


class TestTodayReport:

    def test_today_and_month_totals(self):
        repo, clock = FakeStoreRepository(StoreState()), FixedClock()
        repo.get().catalog.set_buy_prices({"Maggi": 15})
        clock.now = datetime(2024, 5, 2, 9, 0, tzinfo=IST)
        _order(repo, clock, "Sam", "104", 1)
        clock.now = datetime(2024, 5, 10, 12, 0, tzinfo=IST)
        _order(repo, clock, "Sam", "104", 2, mode="delivery")
        cancelled = _order(repo, clock, "Ria", "201", 5)
        UpdateOrderStatusHandler(repo, clock).handle(cancelled, "cancel")

        report = ShowTodayReportHandler(repo, clock).handle()

        assert report.day == clock.now.date()
        assert report.today.orders_count == 1
        assert report.today.revenue == Money.of(50)
        assert report.today.profit == Decimal("10")
        assert report.today.items == {"Maggi": 2}
        assert report.month == Month(2024, 5)
        assert report.month_totals.orders_count == 2
        assert report.month_totals.revenue == Money.of(70)

    def test_empty_store(self):
        repo = FakeStoreRepository(StoreState())
        report = ShowTodayReportHandler(repo, FixedClock()).handle()
        assert report.today.orders_count == 0
        assert report.month_totals.revenue == Money.zero()


class TestCustomerReport:

    def test_manual_entry_replaces_computed_row(self):
        repo, clock = FakeStoreRepository(StoreState()), FixedClock()
        _order(repo, clock, "Sam", "104", 2)
        _order(repo, clock, "sam ", "104", 1)
        SetCustomerSpendHandler(repo, clock).handle(
            "Sam", "104", 500, 7, scope="month", month="2024-05"
        )

        month, rows = ShowCustomerReportHandler(repo, clock).for_month("2024-05")

        assert month == Month(2024, 5)
        assert len(rows) == 1
        assert rows[0].key == "sam|104"
        assert rows[0].total_spent == Money.of(500)
        assert rows[0].orders_count == 7
        assert rows[0].manual is True

    def test_month_override_does_not_leak_into_other_month(self):
        repo, clock = FakeStoreRepository(StoreState()), FixedClock()
        _order(repo, clock, "Sam", "104", 1)
        SetCustomerSpendHandler(repo, clock).handle(
            "Sam", "104", 500, 7, scope="month", month="2024-04"
        )

        _, rows = ShowCustomerReportHandler(repo, clock).for_month("2024-05")

        assert rows[0].total_spent == Money.of(20)
        assert rows[0].manual is False

    def test_missing_month_defaults_to_current(self):
        repo, clock = FakeStoreRepository(StoreState()), FixedClock()
        month, _ = ShowCustomerReportHandler(repo, clock).for_month(None)
        assert month == Month(2024, 5)

    def test_top_customers_limited_to_three(self):
        repo, clock = FakeStoreRepository(StoreState()), FixedClock()
        for qty, name in enumerate(["A", "B", "C", "D"], start=1):
            _order(repo, clock, name, "100", qty)

        _, rows = ShowCustomerReportHandler(repo, clock).top()

        assert [r.name for r in rows] == ["D", "C", "B"]

    def test_lifetime_spans_months_and_uses_lifetime_entries(self):
        repo, clock = FakeStoreRepository(StoreState()), FixedClock()
        clock.now = datetime(2024, 3, 1, 10, 0, tzinfo=IST)
        _order(repo, clock, "Sam", "104", 1)
        clock.now = datetime(2024, 5, 1, 10, 0, tzinfo=IST)
        _order(repo, clock, "Sam", "104", 1)
        SetCustomerSpendHandler(repo, clock).handle("Ria", "201", 80, 4, scope="lifetime")

        rows = ShowCustomerReportHandler(repo, clock).lifetime()

        assert [(r.key, r.total_spent) for r in rows] == [
            ("ria|201", Money.of(80)),
            ("sam|104", Money.of(40)),
        ]


class TestDistributorSummary:

    def test_orders_grouped_by_bucket(self):
        repo, clock = FakeStoreRepository(StoreState()), FixedClock()
        _order(repo, clock, "Sam", "104", 1)
        _order(repo, clock, "Ria", "450", 2)
        _order(repo, clock, "Ana", "450", 1)

        month, summary = ShowDistributorSummaryHandler(repo, clock).handle("2024-05")

        assert month == Month(2024, 5)
        assert set(summary) == {"104", "407", "607"}
        assert summary["407"].orders_count == 2
        assert summary["407"].amount == Money.of(60)
        assert summary["407"].items == {"Maggi": 3}
        assert summary["607"].orders_count == 0
