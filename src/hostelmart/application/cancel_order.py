"""Application service: Customer Cancel Order use case.

A customer may cancel their own order within the cancel window by
echoing back the order id. All line quantities return to the catalog
and to the bucket the order was collected from.
"""

from __future__ import annotations

import logging

from hostelmart.application.clock import Clock, local_now
from hostelmart.domain.model.order import Order
from hostelmart.domain.repository.store_repository import StoreRepository
from hostelmart.domain.service.stock_allocation_service import (
    StockAllocationService,
)

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(self, store_repo: StoreRepository, clock: Clock = local_now) -> None:
        self._store_repo = store_repo
        self._clock = clock

    def handle(self, order_id: int, confirm_order_id: int) -> Order:
        state = self._store_repo.get()
        order = state.get_order(order_id)
        now = self._clock()

        # All checks run before any stock moves.
        order.check_customer_cancel(confirm_order_id, now)
        order.cancel(now)
        StockAllocationService(state.catalog, state.distributor).release_for_order(order)

        self._store_repo.save(state)
        logger.info("Order #%d cancelled by customer", order.id)
        return order
