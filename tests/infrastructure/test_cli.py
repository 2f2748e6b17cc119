"""CLI tests using click's CliRunner against a temporary snapshot file."""

import pytest
from click.testing import CliRunner

from hostelmart.application.dto import OrderItemSpec
from hostelmart.application.place_order import PlaceOrderHandler
from hostelmart.infrastructure.cli.main import cli
from hostelmart.infrastructure.persistence.json_store_repository import (
    JsonStoreRepository,
)
from tests.fakes import FixedClock


@pytest.fixture
def data_file(tmp_path, monkeypatch):
    path = tmp_path / "store.json"
    monkeypatch.setenv("HOSTELMART_DATA_FILE", str(path))
    return path


@pytest.fixture
def runner():
    return CliRunner()


def _seed_order(path) -> int:
    return PlaceOrderHandler(JsonStoreRepository(path), clock=FixedClock()).handle(
        "Sam", "104", "BH-1", "delivery", [OrderItemSpec("Maggi", 2)]
    ).order_id


class TestStockCommands:

    def test_show_defaults(self, runner, data_file):
        result = runner.invoke(cli, ["stock", "show"])
        assert result.exit_code == 0
        assert "Maggi" in result.output
        assert "₹20.00" in result.output

    def test_set_keeps_other_products(self, runner, data_file):
        result = runner.invoke(cli, ["stock", "set", "--product", "Maggi", "--quantity", "40"])
        assert result.exit_code == 0
        stock = JsonStoreRepository(data_file).get().catalog.stock
        assert stock["Maggi"] == 40
        assert stock["Kurkure"] == 9


class TestOrderCommands:

    def test_list_empty(self, runner, data_file):
        result = runner.invoke(cli, ["order", "list"])
        assert "No orders yet." in result.output

    def test_list_and_show(self, runner, data_file):
        order_id = _seed_order(data_file)

        listing = runner.invoke(cli, ["order", "list"])
        assert str(order_id) in listing.output

        shown = runner.invoke(cli, ["order", "show", "--id", str(order_id)])
        assert shown.exit_code == 0
        assert "Order Total" in shown.output
        assert "₹50.00" in shown.output

    def test_accept_then_cancel(self, runner, data_file):
        order_id = _seed_order(data_file)

        assert runner.invoke(cli, ["order", "accept", "--id", str(order_id)]).exit_code == 0
        result = runner.invoke(cli, ["order", "cancel", "--id", str(order_id)])
        assert result.exit_code == 0

        state = JsonStoreRepository(data_file).get()
        assert state.get_order(order_id).status.value == "cancelled"
        assert state.catalog.stock["Maggi"] == 24

    def test_unknown_order_fails_cleanly(self, runner, data_file):
        result = runner.invoke(cli, ["order", "show", "--id", "99"])
        assert result.exit_code == 1
        assert "Order #99 not found" in result.output


class TestReportCommands:

    def test_today(self, runner, data_file):
        result = runner.invoke(cli, ["report", "today"])
        assert result.exit_code == 0
        assert "Orders:  0" in result.output

    def test_customers(self, runner, data_file):
        _seed_order(data_file)
        result = runner.invoke(cli, ["report", "customers", "--month", "2024-05"])
        assert result.exit_code == 0
        assert "Customers (2024-05)" in result.output
        assert "Sam" in result.output

    def test_customers_lifetime(self, runner, data_file):
        result = runner.invoke(cli, ["report", "customers", "--lifetime"])
        assert "Customers (lifetime)" in result.output
        assert "No customers found." in result.output

    def test_distributors(self, runner, data_file):
        _seed_order(data_file)
        result = runner.invoke(cli, ["report", "distributors", "--month", "2024-05"])
        assert result.exit_code == 0
        assert "Room 104: 1 orders, ₹50.00" in result.output
