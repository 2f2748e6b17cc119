"""Application service: Place Order use case (settlement).

Orchestrates the flow between the catalog, the distributor buckets and
the order log. Prices always come from the catalog; a client-submitted
price is only used for products the catalog does not know.
"""

from __future__ import annotations

import logging

from hostelmart.application.clock import Clock, local_now
from hostelmart.application.dto import OrderItemSpec, PlaceOrderResult
from hostelmart.application.notifications import OrderNotifier
from hostelmart.domain.exceptions import ValidationError
from hostelmart.domain.model.catalog import Catalog
from hostelmart.domain.model.distributor import resolve_bucket
from hostelmart.domain.model.order import (
    CANCEL_WINDOW,
    DeliveryMode,
    Order,
    OrderLineItem,
)
from hostelmart.domain.model.value_objects import Money, coerce_quantity
from hostelmart.domain.repository.store_repository import StoreRepository
from hostelmart.domain.service.stock_allocation_service import (
    StockAllocationService,
)

logger = logging.getLogger(__name__)


class PlaceOrderHandler:

    def __init__(
        self,
        store_repo: StoreRepository,
        notifier: OrderNotifier | None = None,
        clock: Clock = local_now,
    ) -> None:
        self._store_repo = store_repo
        self._notifier = notifier
        self._clock = clock

    def handle(
        self,
        customer_name: str,
        room: str,
        hostel: str,
        mode: str,
        item_specs: list[OrderItemSpec],
    ) -> PlaceOrderResult:
        """Settle a new order.

        Steps:
        1. Resolve the distributor bucket from the room number.
        2. Price every line from the catalog (snapshot sell and buy prices).
        3. Build the Order, which computes total and profit once.
        4. Decrement catalog and bucket stock, persist, notify.
        """
        if not isinstance(item_specs, list):
            raise ValidationError("Order items must be a list")
        delivery_mode = DeliveryMode.parse(mode)

        state = self._store_repo.get()
        now = self._clock()
        bucket = resolve_bucket(room)
        line_items = self._price_lines(state.catalog, item_specs)

        order = Order.create(
            order_id=state.allocate_order_id(now),
            customer_name=str(customer_name or ""),
            room=str(room if room is not None else ""),
            hostel=str(hostel or ""),
            mode=delivery_mode,
            items=line_items,
            collect_from_room=bucket,
            created_at=now,
        )

        StockAllocationService(state.catalog, state.distributor).allocate_for_order(order)
        state.add_order(order)
        self._store_repo.save(state)

        self._log_order(order)
        if self._notifier is not None:
            self._notifier.notify_new_order(order)

        return PlaceOrderResult(
            order_id=order.id,
            cancel_window_ms=int(CANCEL_WINDOW.total_seconds() * 1000),
        )

    @staticmethod
    def _price_lines(catalog: Catalog, item_specs: list[OrderItemSpec]) -> list[OrderLineItem]:
        """Price each requested line; repeated products merge into one line."""
        lines: dict[str, OrderLineItem] = {}
        for spec in item_specs:
            qty = coerce_quantity(spec.quantity)
            existing = lines.get(spec.name)
            if existing is not None:
                existing.quantity += qty
                continue
            sell_price = catalog.sell_price(spec.name)
            if sell_price is None:
                sell_price = Money.coerce(spec.price)
            lines[spec.name] = OrderLineItem(
                name=spec.name,
                quantity=qty,
                sell_price=sell_price,
                buy_price=catalog.buy_price(spec.name),
            )
        return list(lines.values())

    @staticmethod
    def _log_order(order: Order) -> None:
        items = ", ".join(f"{i.name} x{i.quantity}" for i in order.items)
        logger.info(
            "New order #%d: %s, room %s (%s), %s, collect from %s: %s, total %s",
            order.id, order.customer_name, order.room, order.hostel,
            order.mode.value, order.collect_from_room, items or "no items", order.total,
        )
