"""Catalog aggregate: stock counts plus buy and sell prices per product.

Products are identified by name. Each of the three maps is replaced
wholesale by the admin; nothing ever deletes a product explicitly.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from hostelmart.domain.exceptions import ValidationError
from hostelmart.domain.model.value_objects import Money, parse_quantity

logger = logging.getLogger(__name__)

DEFAULT_STOCK: dict[str, int] = {
    "Maggi": 24,
    "Kurkure": 9,
    "Bhujia": 2,
    "Ariel": 1,
    "Bhoot Chips": 5,
    "Bingo Onion Chips": 5,
}

DEFAULT_SELL_PRICES: dict[str, Decimal] = {
    "Maggi": Decimal("20"),
    "Kurkure": Decimal("10"),
    "Bhujia": Decimal("10"),
    "Ariel": Decimal("10"),
    "Bhoot Chips": Decimal("20"),
    "Bingo Onion Chips": Decimal("20"),
}


@dataclass
class Catalog:
    """Current stock and price lists.

    Stock may go negative: orders are never refused for lack of stock,
    overselling is corrected by hand.
    """

    stock: dict[str, int] = field(default_factory=dict)
    buy_prices: dict[str, Money] = field(default_factory=dict)
    sell_prices: dict[str, Money] = field(default_factory=dict)

    @staticmethod
    def with_defaults() -> Catalog:
        return Catalog(
            stock=dict(DEFAULT_STOCK),
            buy_prices={name: Money.zero() for name in DEFAULT_STOCK},
            sell_prices={name: Money(price) for name, price in DEFAULT_SELL_PRICES.items()},
        )

    # --- Stock ----------------------------------------------------------------

    def get_stock(self) -> dict[str, int]:
        return dict(self.stock)

    def set_stock(self, stock: Mapping[str, object]) -> None:
        """Replace the whole stock map (no merge, keys are not checked)."""
        self.stock = {str(name): parse_quantity(qty) for name, qty in stock.items()}
        logger.info("Stock replaced: %s", self.stock)

    def adjust_stock(self, name: str, delta: int) -> None:
        """Apply *delta* to a product's stock; unknown products are ignored."""
        if name not in self.stock:
            return
        self.stock[name] += delta

    # --- Prices ---------------------------------------------------------------

    def set_buy_prices(self, prices: Mapping[str, object]) -> None:
        self.buy_prices = self._parse_prices(prices)
        logger.info("Buy prices replaced for %d products", len(self.buy_prices))

    def set_sell_prices(self, prices: Mapping[str, object]) -> None:
        self.sell_prices = self._parse_prices(prices)
        logger.info("Sell prices replaced for %d products", len(self.sell_prices))

    def sell_price(self, name: str) -> Money | None:
        return self.sell_prices.get(name)

    def buy_price(self, name: str) -> Money:
        return self.buy_prices.get(name, Money.zero())

    @property
    def product_names(self) -> list[str]:
        names = list(self.stock)
        for name in (*self.sell_prices, *self.buy_prices):
            if name not in names:
                names.append(name)
        return names

    @staticmethod
    def _parse_prices(prices: Mapping[str, object]) -> dict[str, Money]:
        parsed: dict[str, Money] = {}
        for name, price in prices.items():
            try:
                parsed[str(name)] = Money.of(price)  # type: ignore[arg-type]
            except ValidationError as exc:
                raise ValidationError(f"Invalid price for '{name}': {price!r}") from exc
        return parsed
