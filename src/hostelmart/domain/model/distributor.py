"""Distributor buckets: per-block stock mirrors.

Every order is collected from one of three dormitory blocks, picked by the
customer's room number. Each block keeps its own product -> quantity map
which moves in lockstep with the catalog stock.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from hostelmart.domain.model.value_objects import MAX_QUANTITY

BUCKET_LOW = "104"
BUCKET_MID = "407"
BUCKET_HIGH = "607"
BUCKETS: tuple[str, ...] = (BUCKET_LOW, BUCKET_MID, BUCKET_HIGH)


def resolve_bucket(room: object) -> str:
    """Map a room number to its distributor bucket.

    Rooms 0-299 collect from 104, 300-599 from 407, anything else
    (including non-numeric or missing rooms) from 607.
    """
    if room is None or isinstance(room, bool):
        return BUCKET_HIGH
    try:
        number = Decimal(str(room).strip())
    except (InvalidOperation, ValueError):
        return BUCKET_HIGH
    if not number.is_finite():
        return BUCKET_HIGH
    if 0 <= number <= 299:
        return BUCKET_LOW
    if 300 <= number <= 599:
        return BUCKET_MID
    return BUCKET_HIGH


def _as_int(value: object) -> int:
    if isinstance(value, bool):
        return 0
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return 0
    if not number.is_finite() or abs(number) > MAX_QUANTITY:
        return 0
    return int(number)


@dataclass
class DistributorStock:
    """Stock owed by each bucket, always holding exactly the three buckets."""

    buckets: dict[str, dict[str, int]] = field(
        default_factory=lambda: {bucket: {} for bucket in BUCKETS}
    )

    @staticmethod
    def normalize(raw: object, products: Iterable[str]) -> DistributorStock:
        """Build bucket maps from untrusted input.

        Never fails: unknown buckets and products are dropped, missing ones
        default to zero, malformed values degrade to zero.
        """
        names = list(products)
        source = raw if isinstance(raw, dict) else {}
        buckets: dict[str, dict[str, int]] = {}
        for bucket in BUCKETS:
            given = source.get(bucket)
            given = given if isinstance(given, dict) else {}
            buckets[bucket] = {name: _as_int(given.get(name, 0)) for name in names}
        return DistributorStock(buckets)

    def snapshot(self) -> dict[str, dict[str, int]]:
        return {bucket: dict(stock) for bucket, stock in self.buckets.items()}

    def adjust(self, bucket: str, name: str, delta: int) -> None:
        stock = self.buckets.setdefault(bucket, {})
        stock.setdefault(name, 0)
        stock[name] += delta
