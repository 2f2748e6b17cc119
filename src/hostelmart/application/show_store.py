"""Application service: read-only views of the store snapshot (queries)."""

from __future__ import annotations

from hostelmart.domain.model.order import Order
from hostelmart.domain.model.value_objects import Money
from hostelmart.domain.repository.store_repository import StoreRepository


class ShowStoreHandler:

    def __init__(self, store_repo: StoreRepository) -> None:
        self._store_repo = store_repo

    def stock(self) -> dict[str, int]:
        return self._store_repo.get().catalog.get_stock()

    def buy_prices(self) -> dict[str, Money]:
        return dict(self._store_repo.get().catalog.buy_prices)

    def sell_prices(self) -> dict[str, Money]:
        return dict(self._store_repo.get().catalog.sell_prices)

    def distributor_stock(self) -> dict[str, dict[str, int]]:
        return self._store_repo.get().distributor.snapshot()

    def is_open(self) -> bool:
        return self._store_repo.get().store_open

    def orders(self) -> list[Order]:
        return list(self._store_repo.get().orders)

    def order(self, order_id: int) -> Order:
        return self._store_repo.get().get_order(order_id)
