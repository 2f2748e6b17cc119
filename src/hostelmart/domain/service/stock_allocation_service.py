"""Domain service: Stock Allocation.

Coordinates the cross-aggregate stock movement for an order: every
change to the catalog stock is mirrored, with the same sign and
magnitude, in the distributor bucket the order collects from.
"""

from __future__ import annotations

from hostelmart.domain.model.catalog import Catalog
from hostelmart.domain.model.distributor import DistributorStock
from hostelmart.domain.model.order import Order


class StockAllocationService:

    def __init__(self, catalog: Catalog, distributor: DistributorStock) -> None:
        self._catalog = catalog
        self._distributor = distributor

    def allocate_for_order(self, order: Order) -> None:
        """Take every line quantity out of catalog and bucket stock.

        No floor check: stock is allowed to go negative.
        """
        for line in order.items:
            self._move(order.collect_from_room, line.name, -line.quantity)

    def release_for_order(self, order: Order) -> None:
        """Put every line quantity back (full cancellation)."""
        for line in order.items:
            self._move(order.collect_from_room, line.name, line.quantity)

    def release_items(self, bucket: str, quantities: dict[str, int]) -> None:
        """Put back only the given quantities (partial reduction)."""
        for name, qty in quantities.items():
            self._move(bucket, name, qty)

    def _move(self, bucket: str, name: str, delta: int) -> None:
        self._catalog.adjust_stock(name, delta)
        self._distributor.adjust(bucket, name, delta)
