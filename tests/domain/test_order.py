"""Unit tests for the Order aggregate and its business rules."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from hostelmart.domain.exceptions import (
    AlreadyCancelledError,
    CancelWindowExpiredError,
    OrderIdMismatchError,
    ValidationError,
)
from hostelmart.domain.model.order import (
    DeliveryMode,
    Order,
    OrderLineItem,
    OrderStatus,
)
from hostelmart.domain.model.value_objects import Money
from tests.fakes import IST

CREATED = datetime(2024, 5, 10, 12, 0, tzinfo=IST)


def _make_item(name: str = "Maggi", qty: int = 1, sell: str = "20", buy: str = "0") -> OrderLineItem:
    """Helper to build a line item with locked prices."""
    return OrderLineItem(name=name, quantity=qty, sell_price=Money.of(sell), buy_price=Money.of(buy))


def _make_order(items=None, mode=DeliveryMode.DELIVERY) -> Order:
    return Order.create(
        order_id=1,
        customer_name=" Sam ",
        room="104",
        hostel="BH-1",
        mode=mode,
        items=items if items is not None else [_make_item(qty=2)],
        collect_from_room="104",
        created_at=CREATED,
    )


class TestOrderCreation:

    def test_delivery_total_and_profit(self):
        order = _make_order([_make_item("Maggi", qty=2, sell="20", buy="0")])
        assert order.total == Money.of(50)
        assert order.profit == Decimal("40")
        assert order.status == OrderStatus.ACTIVE
        assert order.customer_name == "Sam"

    def test_pickup_has_no_delivery_charge(self):
        order = _make_order([_make_item(qty=2)], mode=DeliveryMode.PICKUP)
        assert order.delivery_charge == Money.zero()
        assert order.total == Money.of(40)

    def test_profit_is_sell_minus_buy_times_qty(self):
        order = _make_order([
            _make_item("Maggi", qty=3, sell="20", buy="12"),
            _make_item("Kurkure", qty=2, sell="10", buy="11"),
        ])
        assert order.profit == Decimal("22")

    def test_empty_order_costs_only_delivery(self):
        order = _make_order([])
        assert order.total == Money.of(10)
        assert order.profit == Decimal("0")

    def test_time_label(self):
        assert _make_order().time_label == "10/05/2024, 12:00:00 PM"


class TestDeliveryMode:

    def test_parse(self):
        assert DeliveryMode.parse("pickup") is DeliveryMode.PICKUP

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValidationError, match="pickup' or 'delivery"):
            DeliveryMode.parse("drone")


class TestCustomerCancelChecks:

    def test_within_window_passes(self):
        order = _make_order()
        order.check_customer_cancel(1, CREATED + timedelta(seconds=120))

    def test_after_window_expires(self):
        order = _make_order()
        with pytest.raises(CancelWindowExpiredError):
            order.check_customer_cancel(1, CREATED + timedelta(seconds=121))

    def test_id_mismatch(self):
        with pytest.raises(OrderIdMismatchError):
            _make_order().check_customer_cancel(2, CREATED)

    def test_already_cancelled(self):
        order = _make_order()
        order.cancel(CREATED)
        with pytest.raises(AlreadyCancelledError):
            order.check_customer_cancel(1, CREATED)


class TestTransitions:

    def test_cancel_stamps_time(self):
        order = _make_order()
        order.cancel(CREATED + timedelta(minutes=5))
        assert order.status == OrderStatus.CANCELLED
        assert order.cancelled_at == CREATED + timedelta(minutes=5)

    def test_cannot_cancel_twice(self):
        order = _make_order()
        order.cancel(CREATED)
        with pytest.raises(AlreadyCancelledError, match="already cancelled"):
            order.cancel(CREATED)

    def test_accept_then_cancel(self):
        order = _make_order()
        order.accept(CREATED)
        assert order.status == OrderStatus.ACCEPTED
        order.cancel(CREATED)
        assert order.status == OrderStatus.CANCELLED

    def test_cannot_accept_cancelled(self):
        order = _make_order()
        order.cancel(CREATED)
        with pytest.raises(AlreadyCancelledError):
            order.accept(CREATED)


class TestReduceQuantities:

    def _order(self) -> Order:
        return _make_order([
            _make_item("Maggi", qty=3, sell="20", buy="10"),
            _make_item("Kurkure", qty=2, sell="10", buy="5"),
        ])

    def test_partial_reduction_reprices(self):
        order = self._order()
        reductions = order.reduce_quantities({"Maggi": 1}, CREATED)
        assert reductions == {"Maggi": 2}
        assert order.status == OrderStatus.PARTIALLY_ADJUSTED
        assert order.items[0].quantity == 1
        assert order.total == Money.of(20 + 20 + 10)
        assert order.profit == Decimal(10 + 10)
        assert order.adjusted_at == CREATED

    def test_larger_target_never_increases(self):
        order = self._order()
        assert order.reduce_quantities({"Maggi": 10}, CREATED) == {}
        assert order.items[0].quantity == 3
        assert order.status == OrderStatus.ACTIVE

    def test_equal_target_is_noop(self):
        order = self._order()
        assert order.reduce_quantities({"Maggi": 3, "Kurkure": 2}, CREATED) == {}
        assert order.total == Money.of(90)

    def test_negative_target_clamps_to_zero(self):
        order = self._order()
        assert order.reduce_quantities({"Kurkure": -4}, CREATED) == {"Kurkure": 2}
        assert [i.name for i in order.items] == ["Maggi"]

    def test_emptying_order_cancels_it(self):
        order = self._order()
        order.reduce_quantities({"Maggi": 0, "Kurkure": 0}, CREATED)
        assert order.status == OrderStatus.CANCELLED
        assert order.items == []
        assert order.total == Money.zero()
        assert order.delivery_charge == Money.zero()
        assert order.profit == Decimal("0")
        assert order.cancelled_at == CREATED

    def test_unknown_product_rejected(self):
        with pytest.raises(ValidationError, match="not found in order"):
            self._order().reduce_quantities({"Oreo": 0}, CREATED)

    def test_cancelled_order_rejected(self):
        order = self._order()
        order.cancel(CREATED)
        with pytest.raises(AlreadyCancelledError):
            order.reduce_quantities({"Maggi": 1}, CREATED)


class TestPriceSnapshot:

    def test_reprice_uses_locked_prices(self):
        item = _make_item(qty=2, sell="20", buy="5")
        order = _make_order([item])
        order.reprice()
        assert order.total == Money.of(50)
        assert order.profit == Decimal("30")

    def test_reported_profit_zero_when_excluded(self):
        order = _make_order()
        order.exclude_from_profit_stats = True
        assert order.reported_profit == Decimal("0")
        assert order.profit == Decimal("40")
