"""Application service: bulk-exclude a month's orders from statistics.

"Reset customer money" hides a month's orders from the customer spend
reports; "reset profit" zeroes their profit in the sales reports. Orders
themselves are kept.
"""

from __future__ import annotations

import logging

from hostelmart.application.clock import Clock, local_now
from hostelmart.domain.model.value_objects import Month
from hostelmart.domain.repository.store_repository import StoreRepository

logger = logging.getLogger(__name__)

RESET_CUSTOMER_MONEY = "customer-money"
RESET_PROFIT = "profit"


class ResetMonthStatsHandler:

    def __init__(
        self,
        store_repo: StoreRepository,
        kind: str,
        clock: Clock = local_now,
    ) -> None:
        if kind not in (RESET_CUSTOMER_MONEY, RESET_PROFIT):
            raise ValueError(f"Unknown reset {kind!r}")
        self._store_repo = store_repo
        self._kind = kind
        self._clock = clock

    def handle(self, month: str | None = None) -> int:
        """Flag every order of *month*; returns how many orders were flagged."""
        target = Month.parse(month, self._clock())
        state = self._store_repo.get()

        flagged = 0
        for order in state.orders:
            if not target.contains(order.created_at):
                continue
            if self._kind == RESET_CUSTOMER_MONEY:
                order.exclude_from_customer_stats = True
            else:
                order.exclude_from_profit_stats = True
            flagged += 1

        self._store_repo.save(state)
        logger.info("Reset %s for %s: %d orders flagged", self._kind, target, flagged)
        return flagged
