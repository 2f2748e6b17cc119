"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the web/CLI layers and the application layer
without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from hostelmart.domain.model.value_objects import Month
from hostelmart.domain.service.report_aggregation import SalesTotals


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: one requested line as the customer submitted it.

    ``quantity`` and ``price`` are left raw; settlement coerces them.
    """

    name: str
    quantity: object
    price: object = None


@dataclass(frozen=True)
class PlaceOrderResult:
    order_id: int
    cancel_window_ms: int


@dataclass(frozen=True)
class TodayReport:
    day: date
    today: SalesTotals
    month: Month
    month_totals: SalesTotals
