"""Application services: manual customer ledger entries.

An entry overrides the computed spend for one ``name|room`` key, either
for one month's report or for the lifetime report.
"""

from __future__ import annotations

from datetime import datetime

from hostelmart.application.clock import Clock, local_now
from hostelmart.domain.exceptions import ValidationError
from hostelmart.domain.model.ledger import (
    SCOPE_LIFETIME,
    SCOPE_MONTH,
    ManualLedgerEntry,
)
from hostelmart.domain.model.value_objects import Money, Month, parse_quantity
from hostelmart.domain.repository.store_repository import StoreRepository


def resolve_scope(scope: object, month: str | None, now: datetime) -> Month | None:
    """Turn a scope name into a Month, or None for the lifetime ledger."""
    if scope == SCOPE_LIFETIME:
        return None
    if scope == SCOPE_MONTH:
        return Month.parse(month, now)
    raise ValidationError(
        f"Scope must be '{SCOPE_MONTH}' or '{SCOPE_LIFETIME}', got {scope!r}"
    )


def _require_name(name: object) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Customer name is required")
    return name.strip()


class SetCustomerSpendHandler:

    def __init__(self, store_repo: StoreRepository, clock: Clock = local_now) -> None:
        self._store_repo = store_repo
        self._clock = clock

    def handle(
        self,
        name: str,
        room: str,
        total_spent: object,
        orders_count: object,
        scope: str = SCOPE_MONTH,
        month: str | None = None,
    ) -> ManualLedgerEntry:
        entry = ManualLedgerEntry(
            name=_require_name(name),
            room=str(room).strip(),
            total_spent=Money.of(total_spent),  # type: ignore[arg-type]
            orders_count=parse_quantity(orders_count),
        )
        target_month = resolve_scope(scope, month, self._clock())

        state = self._store_repo.get()
        state.ledger.set_entry(entry, target_month)
        self._store_repo.save(state)
        return entry


class DeleteCustomerSpendHandler:

    def __init__(self, store_repo: StoreRepository, clock: Clock = local_now) -> None:
        self._store_repo = store_repo
        self._clock = clock

    def handle(
        self,
        name: str,
        room: str,
        scope: str = SCOPE_MONTH,
        month: str | None = None,
    ) -> bool:
        """Remove an override; returns False when there was none."""
        target_month = resolve_scope(scope, month, self._clock())

        state = self._store_repo.get()
        removed = state.ledger.delete_entry(_require_name(name), str(room), target_month)
        if removed:
            self._store_repo.save(state)
        return removed
