"""Application services: sales, customer and distributor reports (queries)."""

from __future__ import annotations

from hostelmart.application.clock import Clock, local_now
from hostelmart.application.dto import TodayReport
from hostelmart.domain.model.value_objects import Month
from hostelmart.domain.repository.store_repository import StoreRepository
from hostelmart.domain.service.report_aggregation import (
    TOP_CUSTOMERS_LIMIT,
    CustomerRow,
    DistributorSummary,
    customer_spend,
    distributor_month_summary,
    sales_for_day,
    sales_for_month,
)


class ShowTodayReportHandler:

    def __init__(self, store_repo: StoreRepository, clock: Clock = local_now) -> None:
        self._store_repo = store_repo
        self._clock = clock

    def handle(self) -> TodayReport:
        now = self._clock()
        orders = self._store_repo.get().orders
        month = Month.of(now)
        return TodayReport(
            day=now.date(),
            today=sales_for_day(orders, now.date()),
            month=month,
            month_totals=sales_for_month(orders, month),
        )


class ShowCustomerReportHandler:

    def __init__(self, store_repo: StoreRepository, clock: Clock = local_now) -> None:
        self._store_repo = store_repo
        self._clock = clock

    def for_month(self, month: str | None = None) -> tuple[Month, list[CustomerRow]]:
        target = Month.parse(month, self._clock())
        state = self._store_repo.get()
        rows = customer_spend(state.orders, target, state.ledger.entries_for(target))
        return target, rows

    def top(self, month: str | None = None) -> tuple[Month, list[CustomerRow]]:
        target, rows = self.for_month(month)
        return target, rows[:TOP_CUSTOMERS_LIMIT]

    def lifetime(self) -> list[CustomerRow]:
        state = self._store_repo.get()
        return customer_spend(state.orders, None, state.ledger.entries_for(None))


class ShowDistributorSummaryHandler:

    def __init__(self, store_repo: StoreRepository, clock: Clock = local_now) -> None:
        self._store_repo = store_repo
        self._clock = clock

    def handle(self, month: str | None = None) -> tuple[Month, dict[str, DistributorSummary]]:
        target = Month.parse(month, self._clock())
        return target, distributor_month_summary(self._store_repo.get().orders, target)
