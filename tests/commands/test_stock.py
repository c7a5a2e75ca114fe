"""Tests for the stock CLI command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from stockctl.cli import cli


def _json(runner: CliRunner, *args: str) -> dict:
    result = runner.invoke(cli, ["--json", *args])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def _error(runner: CliRunner, *args: str) -> dict:
    result = runner.invoke(cli, ["--json", *args])
    assert result.exit_code == 1
    assert result.stdout == ""
    return json.loads(result.stderr)["error"]


@pytest.fixture
def two_warehouses(cli_runner: CliRunner) -> None:
    _json(cli_runner, "warehouse", "add", "North")
    _json(cli_runner, "warehouse", "add", "South")


@pytest.mark.usefixtures("_isolated_ledger", "two_warehouses")
class TestStockAdd:
    def test_add_new_item(self, cli_runner: CliRunner) -> None:
        data = _json(cli_runner, "stock", "add", "0", "bolts", "10")
        assert data["op"] == "add_stock_item"
        assert data["data"]["item_id"] == 0
        assert data["data"]["quantity"] == 10
        assert data["data"]["merged"] is False

    def test_add_merges_same_name(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "stock", "add", "0", "bolts", "10")
        data = _json(cli_runner, "stock", "add", "0", "bolts", "5")
        assert data["data"]["item_id"] == 0
        assert data["data"]["quantity"] == 15
        assert data["data"]["merged"] is True

    def test_add_to_missing_warehouse(self, cli_runner: CliRunner) -> None:
        error = _error(cli_runner, "stock", "add", "7", "bolts", "10")
        assert error["code"] == "NOT_FOUND"

    def test_add_zero_quantity(self, cli_runner: CliRunner) -> None:
        error = _error(cli_runner, "stock", "add", "0", "bolts", "0")
        assert error["code"] == "INVALID_INPUT"


@pytest.mark.usefixtures("_isolated_ledger", "two_warehouses")
class TestStockGet:
    def test_get(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "stock", "add", "0", "bolts", "10")
        data = _json(cli_runner, "stock", "get", "0")
        assert data["data"]["item_name"] == "bolts"
        assert data["data"]["warehouse_id"] == 0

    def test_get_missing(self, cli_runner: CliRunner) -> None:
        error = _error(cli_runner, "stock", "get", "3")
        assert error["code"] == "NOT_FOUND"
        assert error["message"] == "Item with id=3 not found"


@pytest.mark.usefixtures("_isolated_ledger", "two_warehouses")
class TestStockDecrement:
    def test_partial(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "stock", "add", "0", "bolts", "10")
        data = _json(cli_runner, "stock", "decrement", "0", "4")
        assert data["data"]["quantity"] == 6
        assert data["data"]["removed"] is False

    def test_to_zero_removes_item(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "stock", "add", "0", "bolts", "10")
        data = _json(cli_runner, "stock", "decrement", "0", "10")
        assert data["data"]["removed"] is True
        assert _error(cli_runner, "stock", "get", "0")["code"] == "NOT_FOUND"

    def test_not_enough_stock(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "stock", "add", "0", "bolts", "3")
        error = _error(cli_runner, "stock", "decrement", "0", "5")
        assert error["code"] == "NOT_ENOUGH_STOCK"
        assert error["detail"]["available"] == 3

    def test_missing_item(self, cli_runner: CliRunner) -> None:
        assert _error(cli_runner, "stock", "decrement", "8", "1")["code"] == "NOT_FOUND"


@pytest.mark.usefixtures("_isolated_ledger", "two_warehouses")
class TestStockTransfer:
    def test_partial_transfer(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "stock", "add", "0", "bolts", "10")
        data = _json(cli_runner, "stock", "transfer", "0", "--from", "0", "--to", "1", "4")
        assert data["op"] == "transfer_stock_item"
        assert data["data"]["source"]["quantity"] == 6
        assert data["data"]["destination"]["quantity"] == 4
        assert data["data"]["destination"]["warehouse_id"] == 1

    def test_full_transfer_merges(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "stock", "add", "0", "bolts", "10")
        _json(cli_runner, "stock", "add", "1", "bolts", "1")
        data = _json(cli_runner, "stock", "transfer", "0", "--from", "0", "--to", "1", "10")
        assert data["data"]["source_removed"] is True
        assert data["data"]["merged"] is True
        assert data["data"]["destination"]["quantity"] == 11

    def test_wrong_source_warehouse(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "stock", "add", "0", "bolts", "10")
        error = _error(cli_runner, "stock", "transfer", "0", "--from", "1", "--to", "0", "4")
        assert error["code"] == "NOT_FOUND"

    def test_same_warehouse(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "stock", "add", "0", "bolts", "10")
        error = _error(cli_runner, "stock", "transfer", "0", "--from", "0", "--to", "0", "4")
        assert error["code"] == "INVALID_INPUT"

    def test_requires_from_and_to(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["stock", "transfer", "0", "4"])
        assert result.exit_code == 2


@pytest.mark.usefixtures("_isolated_ledger", "two_warehouses")
class TestStockList:
    def test_list(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "stock", "add", "0", "bolts", "10")
        _json(cli_runner, "stock", "add", "0", "nuts", "5")
        _json(cli_runner, "stock", "add", "1", "washers", "2")
        data = _json(cli_runner, "stock", "list", "0")
        assert [i["item_name"] for i in data["data"]["items"]] == ["bolts", "nuts"]
        assert data["data"]["total_quantity"] == 15

    def test_list_rich(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "stock", "add", "0", "bolts", "10")
        result = cli_runner.invoke(cli, ["stock", "list", "0"])
        assert result.exit_code == 0
        assert "bolts" in result.output
        assert "1 items, total quantity 10" in result.output

    def test_list_empty(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["stock", "list", "1"])
        assert result.exit_code == 0
        assert "holds no stock" in result.output
