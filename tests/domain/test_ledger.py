"""Unit tests for the manual customer ledger."""

import pytest

from hostelmart.domain.exceptions import ValidationError
from hostelmart.domain.model.ledger import CustomerLedger, ManualLedgerEntry, customer_key
from hostelmart.domain.model.value_objects import Money, Month


def test_customer_key_normalizes_name_and_room():
    assert customer_key("  Sam ", " 104 ") == "sam|104"


def test_negative_orders_count_rejected():
    with pytest.raises(ValidationError, match="cannot be negative"):
        ManualLedgerEntry("Sam", "104", Money.of(1), -1)


class TestCustomerLedger:

    def test_month_and_lifetime_scopes_are_separate(self):
        ledger = CustomerLedger()
        ledger.set_entry(ManualLedgerEntry("Sam", "104", Money.of(500), 3), Month(2024, 5))
        ledger.set_entry(ManualLedgerEntry("Sam", "104", Money.of(900), 9), None)

        assert ledger.entries_for(Month(2024, 5))["sam|104"].total_spent == Money.of(500)
        assert ledger.entries_for(Month(2024, 6)) == {}
        assert ledger.entries_for(None)["sam|104"].orders_count == 9

    def test_setting_again_replaces(self):
        ledger = CustomerLedger()
        ledger.set_entry(ManualLedgerEntry("Sam", "104", Money.of(500), 3), None)
        ledger.set_entry(ManualLedgerEntry("SAM", "104", Money.of(10), 1), None)
        assert len(ledger.lifetime) == 1
        assert ledger.lifetime["sam|104"].total_spent == Money.of(10)

    def test_delete(self):
        ledger = CustomerLedger()
        ledger.set_entry(ManualLedgerEntry("Sam", "104", Money.of(500), 3), Month(2024, 5))
        assert ledger.delete_entry("sam", "104", Month(2024, 5)) is True
        assert ledger.monthly == {}
        assert ledger.delete_entry("sam", "104", Month(2024, 5)) is False
