"""JSON-file-backed implementation of StoreRepository.

The whole store lives in one JSON document. It is read once at start-up
into a single in-memory StoreState and rewritten after every change.
Orders written by older revisions (no price snapshot, no status, client
delivery charge) are backfilled while loading, so the rest of the code
only ever sees complete orders.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from hostelmart.domain.model.catalog import Catalog
from hostelmart.domain.model.distributor import DistributorStock, resolve_bucket
from hostelmart.domain.model.ledger import CustomerLedger, ManualLedgerEntry
from hostelmart.domain.model.order import (
    DeliveryMode,
    Order,
    OrderLineItem,
    OrderStatus,
    delivery_charge_for,
)
from hostelmart.domain.model.store import PushSubscription, StoreState
from hostelmart.domain.model.value_objects import (
    MAX_AMOUNT,
    MAX_QUANTITY,
    Money,
    coerce_quantity,
)
from hostelmart.domain.repository.store_repository import StoreRepository

logger = logging.getLogger(__name__)


class JsonStoreRepository(StoreRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._state = self._load()

    # --- StoreRepository interface --------------------------------------------

    def get(self) -> StoreState:
        return self._state

    def save(self, state: StoreState) -> None:
        self._state = state
        try:
            text = json.dumps(self._to_raw(state), indent=2, ensure_ascii=False) + "\n"
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(text, encoding="utf-8")
        except (OSError, TypeError, ValueError):
            logger.exception("Could not persist store snapshot to %s", self._file_path)

    # --- Serialization --------------------------------------------------------

    @classmethod
    def _to_raw(cls, state: StoreState) -> dict:
        catalog = state.catalog
        return {
            "stock": dict(catalog.stock),
            "buyPrice": {name: str(p.amount) for name, p in catalog.buy_prices.items()},
            "sellPrice": {name: str(p.amount) for name, p in catalog.sell_prices.items()},
            "orders": [cls._order_to_raw(order) for order in state.orders],
            "distributorStock": state.distributor.snapshot(),
            "customerLedger": {
                "monthly": {
                    month: {key: cls._entry_to_raw(e) for key, e in entries.items()}
                    for month, entries in state.ledger.monthly.items()
                },
                "lifetime": {
                    key: cls._entry_to_raw(e) for key, e in state.ledger.lifetime.items()
                },
            },
            "storeOpen": state.store_open,
            "subscriptions": [
                {"endpoint": s.endpoint, "keys": dict(s.keys)} for s in state.subscriptions
            ],
        }

    @staticmethod
    def _order_to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "name": order.customer_name,
            "room": order.room,
            "hostel": order.hostel,
            "mode": order.mode.value,
            "items": [
                {
                    "name": item.name,
                    "qty": item.quantity,
                    "sellPriceAtOrder": str(item.sell_price.amount),
                    "buyPriceAtOrder": str(item.buy_price.amount),
                }
                for item in order.items
            ],
            "deliveryCharge": str(order.delivery_charge.amount),
            "total": str(order.total.amount),
            "profit": str(order.profit),
            "status": order.status.value,
            "time": order.time_label,
            "createdAt": order.created_at.isoformat(),
            "acceptedAt": _iso(order.accepted_at),
            "cancelledAt": _iso(order.cancelled_at),
            "adjustedAt": _iso(order.adjusted_at),
            "collectFromRoom": order.collect_from_room,
            "excludeFromCustomerStats": order.exclude_from_customer_stats,
            "excludeFromProfitStats": order.exclude_from_profit_stats,
        }

    @staticmethod
    def _entry_to_raw(entry: ManualLedgerEntry) -> dict:
        return {
            "name": entry.name,
            "room": entry.room,
            "totalSpent": str(entry.total_spent.amount),
            "ordersCount": entry.orders_count,
        }

    @classmethod
    def _to_domain(cls, raw: dict) -> StoreState:
        defaults = Catalog.with_defaults()
        catalog = Catalog(
            stock={str(k): _coerce_int(v) for k, v in raw.get("stock", defaults.stock).items()},
            buy_prices=_price_map(raw.get("buyPrice"), defaults.buy_prices),
            sell_prices=_price_map(raw.get("sellPrice"), defaults.sell_prices),
        )

        orders = [cls._order_to_domain(o, catalog) for o in raw.get("orders", [])]

        raw_buckets = raw.get("distributorStock")
        known = list(catalog.product_names)
        if isinstance(raw_buckets, dict):
            for bucket_stock in raw_buckets.values():
                if isinstance(bucket_stock, dict):
                    known.extend(name for name in bucket_stock if name not in known)
        distributor = DistributorStock.normalize(raw_buckets, known)

        raw_ledger = raw.get("customerLedger") or {}
        ledger = CustomerLedger(
            monthly={
                month: {key: cls._entry_to_domain(e) for key, e in entries.items()}
                for month, entries in (raw_ledger.get("monthly") or {}).items()
            },
            lifetime={
                key: cls._entry_to_domain(e)
                for key, e in (raw_ledger.get("lifetime") or {}).items()
            },
        )

        return StoreState(
            catalog=catalog,
            distributor=distributor,
            orders=orders,
            ledger=ledger,
            store_open=bool(raw.get("storeOpen", True)),
            subscriptions=[
                PushSubscription(endpoint=s["endpoint"], keys=dict(s.get("keys") or {}))
                for s in raw.get("subscriptions", [])
                if isinstance(s, dict) and s.get("endpoint")
            ],
        )

    @staticmethod
    def _entry_to_domain(raw: dict) -> ManualLedgerEntry:
        return ManualLedgerEntry(
            name=raw["name"],
            room=str(raw.get("room", "")),
            total_spent=Money.coerce(raw.get("totalSpent")),
            orders_count=_coerce_int(raw.get("ordersCount", 0)),
        )

    @staticmethod
    def _order_to_domain(raw: dict, catalog: Catalog) -> Order:
        """Rebuild an order, backfilling fields older revisions never stored."""
        order_id = int(raw["id"])
        room = str(raw.get("room", ""))
        mode = DeliveryMode.PICKUP if raw.get("mode") == "pickup" else DeliveryMode.DELIVERY

        items = []
        for i in raw.get("items") or []:
            name = str(i.get("name", ""))
            if "sellPriceAtOrder" in i:
                sell = Money.coerce(i["sellPriceAtOrder"])
            elif "price" in i:
                sell = Money.coerce(i["price"])
            else:
                sell = catalog.sell_price(name) or Money.zero()
            if "buyPriceAtOrder" in i:
                buy = Money.coerce(i["buyPriceAtOrder"])
            else:
                buy = catalog.buy_price(name)
            items.append(
                OrderLineItem(
                    name=name,
                    quantity=coerce_quantity(i.get("qty")),
                    sell_price=sell,
                    buy_price=buy,
                )
            )

        created_at = _parse_time(raw.get("createdAt"))
        if created_at is None:
            created_at = datetime.fromtimestamp(order_id / 1000).astimezone()

        try:
            status = OrderStatus(raw.get("status", OrderStatus.ACTIVE.value))
        except ValueError:
            status = OrderStatus.ACTIVE

        order = Order(
            id=order_id,
            customer_name=str(raw.get("name", "")),
            room=room,
            hostel=str(raw.get("hostel", "")),
            mode=mode,
            items=items,
            collect_from_room=str(raw.get("collectFromRoom") or resolve_bucket(room)),
            created_at=created_at,
            delivery_charge=Money.coerce(raw["deliveryCharge"])
            if "deliveryCharge" in raw
            else delivery_charge_for(mode),
            status=status,
            accepted_at=_parse_time(raw.get("acceptedAt")),
            cancelled_at=_parse_time(raw.get("cancelledAt")),
            adjusted_at=_parse_time(raw.get("adjustedAt")),
            exclude_from_customer_stats=bool(raw.get("excludeFromCustomerStats", False)),
            exclude_from_profit_stats=bool(raw.get("excludeFromProfitStats", False)),
        )
        order.reprice()
        if "total" in raw:
            order.total = Money.coerce(raw["total"], order.total)
        if "profit" in raw:
            order.profit = _decimal(raw["profit"], order.profit)
        return order

    # --- File helpers ---------------------------------------------------------

    def _load(self) -> StoreState:
        if not self._file_path.exists():
            logger.info("No snapshot at %s, starting from defaults", self._file_path)
            state = StoreState()
            state.distributor = DistributorStock.normalize({}, state.catalog.product_names)
            self.save(state)
            return state
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        state = self._to_domain(raw)
        logger.info(
            "Loaded snapshot from %s: %d orders", self._file_path, len(state.orders)
        )
        return state


def _coerce_int(value: object) -> int:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return 0
    if not number.is_finite() or abs(number) > MAX_QUANTITY:
        return 0
    return int(number)


def _decimal(value: object, default: Decimal) -> Decimal:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default
    if not number.is_finite() or abs(number) > MAX_AMOUNT * MAX_QUANTITY:
        return default
    return number


def _price_map(raw: object, default: dict[str, Money]) -> dict[str, Money]:
    if not isinstance(raw, dict):
        return dict(default)
    return {str(name): Money.coerce(price) for name, price in raw.items()}


def _iso(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment is not None else None


def _parse_time(raw: object) -> datetime | None:
    if not isinstance(raw, str) or not raw:
        return None
    try:
        moment = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    return moment if moment.tzinfo is not None else moment.astimezone()
