"""Manual customer ledger: admin overrides for customer spend totals.

An entry replaces, rather than adds to, the computed totals for its
customer key. Entries are scoped either to one month or to the lifetime
report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from hostelmart.domain.exceptions import ValidationError
from hostelmart.domain.model.value_objects import Money, Month

logger = logging.getLogger(__name__)

SCOPE_MONTH = "month"
SCOPE_LIFETIME = "lifetime"


def customer_key(name: str, room: str) -> str:
    """Normalized ``name|room`` key used to group a customer's orders."""
    return f"{name.strip().lower()}|{room.strip()}"


@dataclass(frozen=True)
class ManualLedgerEntry:
    name: str
    room: str
    total_spent: Money
    orders_count: int

    def __post_init__(self) -> None:
        if self.orders_count < 0:
            raise ValidationError("Orders count cannot be negative")

    @property
    def key(self) -> str:
        return customer_key(self.name, self.room)


@dataclass
class CustomerLedger:
    monthly: dict[str, dict[str, ManualLedgerEntry]] = field(default_factory=dict)
    lifetime: dict[str, ManualLedgerEntry] = field(default_factory=dict)

    def entries_for(self, month: Month | None) -> dict[str, ManualLedgerEntry]:
        """Overrides for a month report, or the lifetime report when None."""
        if month is None:
            return dict(self.lifetime)
        return dict(self.monthly.get(str(month), {}))

    def set_entry(self, entry: ManualLedgerEntry, month: Month | None) -> None:
        if month is None:
            self.lifetime[entry.key] = entry
        else:
            self.monthly.setdefault(str(month), {})[entry.key] = entry
        logger.info(
            "Manual spend for %s set to %s over %d orders (%s)",
            entry.key, entry.total_spent, entry.orders_count, month or SCOPE_LIFETIME,
        )

    def delete_entry(self, name: str, room: str, month: Month | None) -> bool:
        key = customer_key(name, room)
        if month is None:
            removed = self.lifetime.pop(key, None)
        else:
            entries = self.monthly.get(str(month), {})
            removed = entries.pop(key, None)
            if not entries:
                self.monthly.pop(str(month), None)
        return removed is not None
