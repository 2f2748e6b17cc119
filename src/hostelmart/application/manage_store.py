"""Application services: admin replacements of catalog and store settings.

Each handler replaces one map (or flag) wholesale and persists the
snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from hostelmart.domain.exceptions import ValidationError
from hostelmart.domain.model.distributor import DistributorStock
from hostelmart.domain.repository.store_repository import StoreRepository

logger = logging.getLogger(__name__)

PRICE_BUY = "buy"
PRICE_SELL = "sell"


class SetStockHandler:

    def __init__(self, store_repo: StoreRepository) -> None:
        self._store_repo = store_repo

    def handle(self, stock: Mapping[str, object]) -> None:
        state = self._store_repo.get()
        state.catalog.set_stock(stock)
        self._store_repo.save(state)


class SetPricesHandler:

    def __init__(self, store_repo: StoreRepository, kind: str) -> None:
        if kind not in (PRICE_BUY, PRICE_SELL):
            raise ValueError(f"Unknown price list {kind!r}")
        self._store_repo = store_repo
        self._kind = kind

    def handle(self, prices: Mapping[str, object]) -> None:
        """Replace the buy or sell price list.

        Orders already placed keep the prices they captured.
        """
        state = self._store_repo.get()
        if self._kind == PRICE_BUY:
            state.catalog.set_buy_prices(prices)
        else:
            state.catalog.set_sell_prices(prices)
        self._store_repo.save(state)


class SetDistributorStockHandler:

    def __init__(self, store_repo: StoreRepository) -> None:
        self._store_repo = store_repo

    def handle(self, raw: object) -> dict[str, dict[str, int]]:
        """Replace all bucket maps; malformed input degrades to zeros."""
        state = self._store_repo.get()
        state.distributor = DistributorStock.normalize(raw, state.catalog.product_names)
        self._store_repo.save(state)
        logger.info("Distributor stock replaced")
        return state.distributor.snapshot()


class SetStoreStatusHandler:

    def __init__(self, store_repo: StoreRepository) -> None:
        self._store_repo = store_repo

    def handle(self, is_open: object) -> bool:
        if not isinstance(is_open, bool):
            raise ValidationError(f"Store status must be true or false, got {is_open!r}")
        state = self._store_repo.get()
        state.store_open = is_open
        self._store_repo.save(state)
        logger.info("Store is now %s", "open" if is_open else "closed")
        return is_open
