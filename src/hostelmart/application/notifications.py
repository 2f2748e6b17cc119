"""Application service: new-order push notifications.

Delivery is fire-and-forget: the order request never waits for it and
never fails because of it. Subscriptions the push service reports as
gone are pruned from the snapshot.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

from hostelmart.domain.model.order import Order
from hostelmart.domain.model.store import PushSubscription
from hostelmart.domain.repository.store_repository import StoreRepository

logger = logging.getLogger(__name__)

Dispatcher = Callable[[Callable[[], None]], None]


class SubscriptionGoneError(Exception):
    """The push service no longer knows this subscription (HTTP 404/410)."""


class PushGateway(ABC):

    @abstractmethod
    def send(self, subscription: PushSubscription, payload: dict) -> None:
        """Deliver *payload*; raise SubscriptionGoneError for dead endpoints."""


def run_in_background(task: Callable[[], None]) -> None:
    threading.Thread(target=task, name="order-notifier", daemon=True).start()


def new_order_payload(order: Order) -> dict:
    return {
        "title": "New Order",
        "body": f"{order.customer_name} (room {order.room}) ordered {order.total}",
        "url": "/",
        "orderId": order.id,
    }


class OrderNotifier:

    def __init__(
        self,
        store_repo: StoreRepository,
        gateway: PushGateway,
        dispatch: Dispatcher = run_in_background,
    ) -> None:
        self._store_repo = store_repo
        self._gateway = gateway
        self._dispatch = dispatch

    def notify_new_order(self, order: Order) -> None:
        subscriptions = list(self._store_repo.get().subscriptions)
        if not subscriptions:
            return
        payload = new_order_payload(order)
        self._dispatch(lambda: self._deliver(subscriptions, payload))

    def _deliver(self, subscriptions: list[PushSubscription], payload: dict) -> None:
        pruned = False
        for subscription in subscriptions:
            try:
                self._gateway.send(subscription, payload)
            except SubscriptionGoneError:
                logger.info("Pruning expired push subscription %s", subscription.endpoint)
                pruned |= self._store_repo.get().remove_subscription(subscription.endpoint)
            except Exception:
                logger.warning(
                    "Push delivery to %s failed", subscription.endpoint, exc_info=True
                )
        if pruned:
            self._store_repo.save(self._store_repo.get())
