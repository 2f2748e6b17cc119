"""Unit tests for the StoreState snapshot."""

from datetime import datetime

import pytest

from hostelmart.domain.exceptions import EntityNotFoundError, ValidationError
from hostelmart.domain.model.order import DeliveryMode, Order
from hostelmart.domain.model.store import PushSubscription, StoreState
from tests.fakes import IST

NOW = datetime(2024, 5, 10, 12, 0, tzinfo=IST)


def _order(order_id: int) -> Order:
    return Order.create(order_id, "Sam", "104", "BH-1", DeliveryMode.PICKUP, [], "104", NOW)


class TestOrderIds:

    def test_id_is_millisecond_timestamp(self):
        state = StoreState()
        assert state.allocate_order_id(NOW) == int(NOW.timestamp() * 1000)

    def test_same_instant_yields_unique_increasing_ids(self):
        state = StoreState()
        first = state.allocate_order_id(NOW)
        second = state.allocate_order_id(NOW)
        assert second == first + 1

    def test_ids_continue_after_loaded_orders(self):
        future_id = int(NOW.timestamp() * 1000) + 5000
        state = StoreState(orders=[_order(future_id)])
        assert state.allocate_order_id(NOW) == future_id + 1


class TestOrderLookup:

    def test_get_order(self):
        state = StoreState()
        state.add_order(_order(7))
        assert state.get_order(7).id == 7

    def test_missing_order(self):
        with pytest.raises(EntityNotFoundError, match="#8 not found"):
            StoreState().get_order(8)


class TestSubscriptions:

    def test_deduplicated_by_endpoint(self):
        state = StoreState()
        state.add_subscription(PushSubscription("https://push.example/a", {"auth": "1"}))
        state.add_subscription(PushSubscription("https://push.example/a", {"auth": "2"}))
        assert len(state.subscriptions) == 1
        assert state.subscriptions[0].keys == {"auth": "2"}

    def test_remove(self):
        state = StoreState(subscriptions=[PushSubscription("https://push.example/a")])
        assert state.remove_subscription("https://push.example/a") is True
        assert state.remove_subscription("https://push.example/a") is False

    def test_blank_endpoint_rejected(self):
        with pytest.raises(ValidationError):
            PushSubscription("  ")
