"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation

from hostelmart.domain.exceptions import ValidationError

# Upper bounds for anything a client can submit.
MAX_QUANTITY = 10**9
MAX_AMOUNT = Decimal(10**9)


@dataclass(frozen=True)
class Money:
    """Monetary amount in rupees.

    Uses Decimal to avoid floating-point rounding errors in totals and
    profit calculations.
    """

    amount: Decimal
    currency: str = "INR"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be finite, got {self.amount}")
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"₹{self.amount:.2f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0"))

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        if isinstance(amount, bool):
            raise ValidationError(f"Invalid money amount: {amount!r}")
        try:
            value = Decimal(str(amount))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        if value.is_finite() and value > MAX_AMOUNT:
            raise ValidationError(f"Money amount too large: {amount!r}")
        return Money(value)

    @staticmethod
    def coerce(amount: object, default: Money | None = None) -> Money:
        """Like ``of`` but falls back to *default* (zero) on bad input."""
        try:
            return Money.of(amount)  # type: ignore[arg-type]
        except ValidationError:
            return default if default is not None else Money.zero()


def coerce_quantity(raw: object) -> int:
    """Coerce a submitted quantity to a non-negative integer.

    Non-numeric, negative and out-of-range values become 0; fractions
    are truncated.
    """
    if isinstance(raw, bool) or raw is None:
        return 0
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return 0
    if not value.is_finite() or value < 0 or value > MAX_QUANTITY:
        return 0
    return int(value)


def parse_quantity(raw: object) -> int:
    """Strict integer parsing for admin input (stock counts, targets)."""
    if isinstance(raw, bool):
        raise ValidationError(f"Invalid quantity: {raw!r}")
    if isinstance(raw, int):
        if abs(raw) > MAX_QUANTITY:
            raise ValidationError("Quantity out of range")
        return raw
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid quantity: {raw!r}") from exc
    if not value.is_finite() or value != value.to_integral_value():
        raise ValidationError(f"Invalid quantity: {raw!r}")
    if abs(value) > MAX_QUANTITY:
        raise ValidationError(f"Quantity out of range: {raw!r}")
    return int(value)


_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True)
class Month:
    """A calendar month used to filter reports, e.g. ``2024-05``."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValidationError(f"Month must be within 1..12, got {self.month}")

    def contains(self, moment: datetime) -> bool:
        return moment.year == self.year and moment.month == self.month

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @staticmethod
    def of(moment: datetime) -> Month:
        return Month(moment.year, moment.month)

    @staticmethod
    def parse(raw: object, now: datetime) -> Month:
        """Parse ``YYYY-MM``; missing or malformed values mean *now*'s month."""
        if not isinstance(raw, str):
            return Month.of(now)
        match = _MONTH_RE.match(raw.strip())
        if match is None:
            return Month.of(now)
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            return Month.of(now)
        return Month(year, month)
