"""Application service: Admin Accept / Cancel Order use case.

Unlike the customer cancel there is no time window. Cancelled orders are
final and can be neither accepted nor cancelled again.
"""

from __future__ import annotations

import logging

from hostelmart.application.clock import Clock, local_now
from hostelmart.domain.exceptions import ValidationError
from hostelmart.domain.model.order import Order
from hostelmart.domain.repository.store_repository import StoreRepository
from hostelmart.domain.service.stock_allocation_service import (
    StockAllocationService,
)

logger = logging.getLogger(__name__)

ACTION_ACCEPT = "accept"
ACTION_CANCEL = "cancel"


class UpdateOrderStatusHandler:

    def __init__(self, store_repo: StoreRepository, clock: Clock = local_now) -> None:
        self._store_repo = store_repo
        self._clock = clock

    def handle(self, order_id: int, action: str) -> Order:
        if action not in (ACTION_ACCEPT, ACTION_CANCEL):
            raise ValidationError(
                f"Action must be '{ACTION_ACCEPT}' or '{ACTION_CANCEL}', got {action!r}"
            )

        state = self._store_repo.get()
        order = state.get_order(order_id)
        now = self._clock()

        if action == ACTION_ACCEPT:
            order.accept(now)
        else:
            order.cancel(now)
            StockAllocationService(state.catalog, state.distributor).release_for_order(order)

        self._store_repo.save(state)
        logger.info("Order #%d %s by admin", order.id, order.status.value)
        return order
