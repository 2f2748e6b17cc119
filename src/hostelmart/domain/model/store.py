"""StoreState: the single snapshot every operation works against.

Holds the catalog, distributor buckets, order log, manual customer
ledger, open/closed flag and push subscriptions. The repository keeps
one instance in memory and mirrors it to durable storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from hostelmart.domain.exceptions import EntityNotFoundError, ValidationError
from hostelmart.domain.model.catalog import Catalog
from hostelmart.domain.model.distributor import DistributorStock
from hostelmart.domain.model.ledger import CustomerLedger
from hostelmart.domain.model.order import Order


@dataclass(frozen=True)
class PushSubscription:
    endpoint: str
    keys: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.endpoint or not self.endpoint.strip():
            raise ValidationError("Subscription endpoint is required")


@dataclass
class StoreState:
    catalog: Catalog = field(default_factory=Catalog.with_defaults)
    distributor: DistributorStock = field(default_factory=DistributorStock)
    orders: list[Order] = field(default_factory=list)
    ledger: CustomerLedger = field(default_factory=CustomerLedger)
    store_open: bool = True
    subscriptions: list[PushSubscription] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._last_order_id = max((o.id for o in self.orders), default=0)

    # --- Orders ---------------------------------------------------------------

    def allocate_order_id(self, now: datetime) -> int:
        """Millisecond timestamp id, bumped past the last id on collision."""
        candidate = int(now.timestamp() * 1000)
        order_id = max(candidate, self._last_order_id + 1)
        self._last_order_id = order_id
        return order_id

    def add_order(self, order: Order) -> None:
        self.orders.append(order)
        self._last_order_id = max(self._last_order_id, order.id)

    def get_order(self, order_id: int) -> Order:
        for order in self.orders:
            if order.id == order_id:
                return order
        raise EntityNotFoundError(f"Order #{order_id} not found")

    # --- Push subscriptions ---------------------------------------------------

    def add_subscription(self, subscription: PushSubscription) -> None:
        self.remove_subscription(subscription.endpoint)
        self.subscriptions.append(subscription)

    def remove_subscription(self, endpoint: str) -> bool:
        before = len(self.subscriptions)
        self.subscriptions = [s for s in self.subscriptions if s.endpoint != endpoint]
        return len(self.subscriptions) != before
