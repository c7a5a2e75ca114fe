"""Shared pytest fixtures and test helpers for stockctl tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from stockctl.config.settings import StockSettings
from stockctl.infrastructure.database.engine import init_database
from stockctl.infrastructure.ledger import Ledger


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's STOCKCTL_CONFIG from leaking into tests."""
    monkeypatch.delenv("STOCKCTL_CONFIG", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Engine:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def settings(tmp_path: Path) -> StockSettings:
    """Default settings rooted at a temp directory."""
    return StockSettings.from_cli(root=tmp_path)


@pytest.fixture
def ledger(settings: StockSettings) -> Ledger:
    """Fully initialized ledger on a temp directory, without plugin hooks."""
    lg = Ledger(settings)
    try:
        yield lg
    finally:
        lg.close()


@pytest.fixture
def _isolated_ledger(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated ledger.

    Use via ``@pytest.mark.usefixtures("_isolated_ledger")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def add_warehouse(ledger: Ledger, name: str = "Main") -> dict[str, Any]:
    """Create a warehouse via WarehouseService, asserting success."""
    from stockctl.services.warehouse import WarehouseService

    result = WarehouseService(ledger).add_warehouse(name)
    assert result.ok, result.error
    return result.data


def add_stock(ledger: Ledger, warehouse_id: int, item_name: str, quantity: int) -> dict[str, Any]:
    """Add stock via StockService, asserting success."""
    from stockctl.services.stock import StockService

    result = StockService(ledger).add_stock_item(warehouse_id, item_name, quantity)
    assert result.ok, result.error
    return result.data
