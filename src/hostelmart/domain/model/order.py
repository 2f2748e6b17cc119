"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its line items.
All state-transition rules are enforced here; stock movements are
coordinated separately by the stock allocation service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum

from hostelmart.domain.exceptions import (
    AlreadyCancelledError,
    CancelWindowExpiredError,
    OrderIdMismatchError,
    ValidationError,
)
from hostelmart.domain.model.value_objects import Money


class OrderStatus(Enum):
    ACTIVE = "active"
    ACCEPTED = "accepted"
    PARTIALLY_ADJUSTED = "partially_adjusted"
    CANCELLED = "cancelled"


class DeliveryMode(Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"

    @staticmethod
    def parse(raw: object) -> DeliveryMode:
        try:
            return DeliveryMode(raw)
        except ValueError as exc:
            raise ValidationError(
                f"Mode must be 'pickup' or 'delivery', got {raw!r}"
            ) from exc


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
DELIVERY_FEE = Money(Decimal("10"))
CANCEL_WINDOW = timedelta(seconds=120)


def delivery_charge_for(mode: DeliveryMode) -> Money:
    return DELIVERY_FEE if mode is DeliveryMode.DELIVERY else Money.zero()


@dataclass
class OrderLineItem:
    """Captures the sell and buy price of a product at order time.

    Only ``quantity`` can change afterwards (by admin reduction); the
    prices are never re-read from the catalog.
    """

    name: str
    quantity: int
    sell_price: Money  # locked at order time
    buy_price: Money  # locked at order time

    @property
    def line_total(self) -> Money:
        return self.sell_price * self.quantity

    @property
    def line_profit(self) -> Decimal:
        return (self.sell_price.amount - self.buy_price.amount) * self.quantity


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use ``Order.create()`` for new orders so total and profit are computed
    once; the plain ``__init__`` lets the repository reconstitute persisted
    orders (including legacy ones) as they were stored.
    """

    id: int
    customer_name: str
    room: str
    hostel: str
    mode: DeliveryMode
    items: list[OrderLineItem]
    collect_from_room: str
    created_at: datetime
    delivery_charge: Money = field(default_factory=Money.zero)
    total: Money = field(default_factory=Money.zero)
    profit: Decimal = Decimal("0")
    status: OrderStatus = OrderStatus.ACTIVE
    accepted_at: datetime | None = None
    cancelled_at: datetime | None = None
    adjusted_at: datetime | None = None
    exclude_from_customer_stats: bool = False
    exclude_from_profit_stats: bool = False

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_id: int,
        customer_name: str,
        room: str,
        hostel: str,
        mode: DeliveryMode,
        items: list[OrderLineItem],
        collect_from_room: str,
        created_at: datetime,
    ) -> Order:
        order = Order(
            id=order_id,
            customer_name=customer_name.strip(),
            room=room.strip(),
            hostel=hostel.strip(),
            mode=mode,
            items=list(items),
            collect_from_room=collect_from_room,
            created_at=created_at,
            delivery_charge=delivery_charge_for(mode),
        )
        order.reprice()
        return order

    # --- State transitions ----------------------------------------------------

    def check_customer_cancel(self, confirm_order_id: int, now: datetime) -> None:
        """Validate a customer's own cancellation request without mutating."""
        if confirm_order_id != self.id:
            raise OrderIdMismatchError(
                f"Confirmation id {confirm_order_id} does not match order #{self.id}"
            )
        self._ensure_not_cancelled()
        if now - self.created_at > CANCEL_WINDOW:
            raise CancelWindowExpiredError(
                f"Order #{self.id} can no longer be cancelled, the "
                f"{int(CANCEL_WINDOW.total_seconds())}s window has passed"
            )

    def cancel(self, now: datetime) -> None:
        """Transition any non-cancelled status -> CANCELLED.

        Stock reversal must happen alongside (coordinated by the handler
        via the stock allocation service).
        """
        self._ensure_not_cancelled()
        self.status = OrderStatus.CANCELLED
        self.cancelled_at = now

    def accept(self, now: datetime) -> None:
        self._ensure_not_cancelled()
        self.status = OrderStatus.ACCEPTED
        self.accepted_at = now

    def reduce_quantities(self, targets: dict[str, int], now: datetime) -> dict[str, int]:
        """Lower line quantities to the requested targets.

        Each target is clamped to ``[0, current quantity]`` so a line can
        never grow. Returns the reduction per product name; an empty dict
        means nothing changed and the order is left untouched.
        """
        self._ensure_not_cancelled()

        reductions: dict[str, int] = {}
        for name, target in targets.items():
            item = self._find_item(name)
            new_qty = max(0, min(target, item.quantity))
            if new_qty < item.quantity:
                reductions[item.name] = item.quantity - new_qty

        if not reductions:
            return reductions

        for item in self.items:
            item.quantity -= reductions.get(item.name, 0)
        self.items = [item for item in self.items if item.quantity > 0]

        if not self.items:
            self.status = OrderStatus.CANCELLED
            self.cancelled_at = now
            self.delivery_charge = Money.zero()
            self.total = Money.zero()
            self.profit = Decimal("0")
        else:
            self.status = OrderStatus.PARTIALLY_ADJUSTED
            self.adjusted_at = now
            self.delivery_charge = delivery_charge_for(self.mode)
            self.reprice()
        return reductions

    # --- Computed values ------------------------------------------------------

    def reprice(self) -> None:
        """Recompute the cached total and profit from the locked item prices."""
        subtotal = Money.zero()
        profit = Decimal("0")
        for item in self.items:
            subtotal = subtotal + item.line_total
            profit += item.line_profit
        self.total = subtotal + self.delivery_charge
        self.profit = profit

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED

    @property
    def time_label(self) -> str:
        return self.created_at.strftime("%d/%m/%Y, %I:%M:%S %p")

    @property
    def reported_profit(self) -> Decimal:
        """Profit as it counts in reports (zero once excluded by a reset)."""
        return Decimal("0") if self.exclude_from_profit_stats else self.profit

    # --- Internal helpers -----------------------------------------------------

    def _ensure_not_cancelled(self) -> None:
        if self.status == OrderStatus.CANCELLED:
            raise AlreadyCancelledError(f"Order #{self.id} is already cancelled")

    def _find_item(self, name: str) -> OrderLineItem:
        for item in self.items:
            if item.name == name:
                return item
        raise ValidationError(f"Product '{name}' not found in order #{self.id}")
