"""Application service: Adjust Order use case (admin partial reduction).

Lowers line quantities, returns the removed units to stock, and
re-prices what is left with the same flat delivery fee as settlement.
Emptying an order cancels it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from hostelmart.application.clock import Clock, local_now
from hostelmart.domain.model.order import Order
from hostelmart.domain.model.value_objects import parse_quantity
from hostelmart.domain.repository.store_repository import StoreRepository
from hostelmart.domain.service.stock_allocation_service import (
    StockAllocationService,
)

logger = logging.getLogger(__name__)


class AdjustOrderHandler:

    def __init__(self, store_repo: StoreRepository, clock: Clock = local_now) -> None:
        self._store_repo = store_repo
        self._clock = clock

    def handle(self, order_id: int, targets: Mapping[str, object]) -> Order:
        """Reduce an order to the given per-product quantities.

        Args:
            order_id: The order to adjust.
            targets: Mapping of product name -> new quantity. Quantities
                above the current one leave the line unchanged.
        """
        parsed = {str(name): parse_quantity(qty) for name, qty in targets.items()}

        state = self._store_repo.get()
        order = state.get_order(order_id)

        reductions = order.reduce_quantities(parsed, self._clock())
        if not reductions:
            return order

        svc = StockAllocationService(state.catalog, state.distributor)
        svc.release_items(order.collect_from_room, reductions)

        self._store_repo.save(state)
        logger.info(
            "Order #%d adjusted (%s), now %s with total %s",
            order.id, reductions, order.status.value, order.total,
        )
        return order
