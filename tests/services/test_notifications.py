"""Integration tests: services notifying registered plugins."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from stockctl.config.settings import StockSettings
from stockctl.infrastructure.ledger import Ledger
from stockctl.plugins.hookspecs import hookimpl
from stockctl.plugins.hooks import LedgerHooks
from stockctl.services.check import CheckService
from stockctl.services.stock import StockService
from stockctl.services.warehouse import WarehouseService
from tests.conftest import add_stock, add_warehouse

# ---------------------------------------------------------------------------
# Test plugins
# ---------------------------------------------------------------------------


class RecordingPlugin:
    """Plugin that records all hook calls for verification."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    @hookimpl
    def post_add_warehouse(self, warehouse_id: int, name: str) -> None:
        self.calls.append(("post_add_warehouse", {"warehouse_id": warehouse_id, "name": name}))

    @hookimpl
    def post_delete_warehouse(
        self, warehouse_id: int, name: str, removed_item_ids: list[int]
    ) -> None:
        self.calls.append(
            (
                "post_delete_warehouse",
                {"warehouse_id": warehouse_id, "removed_item_ids": removed_item_ids},
            )
        )

    @hookimpl
    def post_add_stock(
        self, item_id: int, warehouse_id: int, item_name: str, quantity: int, merged: bool
    ) -> None:
        self.calls.append(("post_add_stock", {"item_id": item_id, "merged": merged}))

    @hookimpl
    def post_decrement_stock(
        self, item_id: int, warehouse_id: int, quantity: int, remaining: int, removed: bool
    ) -> None:
        self.calls.append(
            ("post_decrement_stock", {"item_id": item_id, "remaining": remaining})
        )

    @hookimpl
    def post_transfer_stock(
        self,
        source_item_id: int,
        destination_item_id: int,
        from_warehouse_id: int,
        to_warehouse_id: int,
        item_name: str,
        quantity: int,
    ) -> None:
        self.calls.append(
            (
                "post_transfer_stock",
                {
                    "source_item_id": source_item_id,
                    "destination_item_id": destination_item_id,
                    "quantity": quantity,
                },
            )
        )

    @hookimpl
    def post_check(self, issues_found: int) -> None:
        self.calls.append(("post_check", {"issues_found": issues_found}))


class BrokenPlugin:
    """Plugin whose hooks always raise."""

    @hookimpl
    def post_add_warehouse(self, warehouse_id: int, name: str) -> None:
        msg = "plugin exploded"
        raise RuntimeError(msg)


def _ledger_with(tmp_path: Path, *plugins: object) -> Ledger:
    hooks = LedgerHooks()
    for index, plugin in enumerate(plugins):
        hooks.register(plugin, name=f"test-{index}")
    return Ledger(StockSettings.from_cli(root=tmp_path), hooks=hooks)


@pytest.fixture
def ledger_with_recorder(tmp_path: Path) -> tuple[Ledger, RecordingPlugin]:
    recorder = RecordingPlugin()
    ledger = _ledger_with(tmp_path, recorder)
    try:
        yield ledger, recorder
    finally:
        ledger.close()


class TestPluginNotifications:
    def test_add_warehouse_fires(self, ledger_with_recorder: tuple[Ledger, RecordingPlugin]) -> None:
        ledger, recorder = ledger_with_recorder
        add_warehouse(ledger, "North")
        assert recorder.calls == [("post_add_warehouse", {"warehouse_id": 0, "name": "North"})]

    def test_stock_lifecycle_fires(
        self, ledger_with_recorder: tuple[Ledger, RecordingPlugin]
    ) -> None:
        ledger, recorder = ledger_with_recorder
        a = add_warehouse(ledger, "A")["id"]
        b = add_warehouse(ledger, "B")["id"]
        item = add_stock(ledger, a, "X", 5)
        add_stock(ledger, a, "X", 1)
        StockService(ledger).transfer_stock_item(item["item_id"], a, b, 2)
        StockService(ledger).decrement_stock_item(item["item_id"], 4)
        WarehouseService(ledger).delete_warehouse(b)

        names = [name for name, _ in recorder.calls]
        assert names == [
            "post_add_warehouse",
            "post_add_warehouse",
            "post_add_stock",
            "post_add_stock",
            "post_transfer_stock",
            "post_decrement_stock",
            "post_delete_warehouse",
        ]
        assert recorder.calls[3][1]["merged"] is True
        assert recorder.calls[4][1] == {
            "source_item_id": 0,
            "destination_item_id": 1,
            "quantity": 2,
        }
        assert recorder.calls[5][1] == {"item_id": 0, "remaining": 0}
        assert recorder.calls[6][1] == {"warehouse_id": b, "removed_item_ids": [1]}

    def test_failed_operation_fires_nothing(
        self, ledger_with_recorder: tuple[Ledger, RecordingPlugin]
    ) -> None:
        ledger, recorder = ledger_with_recorder
        assert not WarehouseService(ledger).add_warehouse("").ok
        assert not StockService(ledger).decrement_stock_item(3, 1).ok
        assert recorder.calls == []

    def test_check_fires(self, ledger_with_recorder: tuple[Ledger, RecordingPlugin]) -> None:
        ledger, recorder = ledger_with_recorder
        CheckService(ledger).check()
        assert recorder.calls == [("post_check", {"issues_found": 0})]


class TestBrokenPlugin:
    def test_plugin_failure_does_not_fail_operation(self, tmp_path: Path) -> None:
        ledger = _ledger_with(tmp_path, BrokenPlugin())
        try:
            result = WarehouseService(ledger).add_warehouse("North")
            assert result.ok
            assert len(result.warnings) == 1
            assert "failed in post_add_warehouse" in result.warnings[0]
            assert "plugin exploded" in result.warnings[0]
            assert WarehouseService(ledger).get_warehouse(0).ok
        finally:
            ledger.close()

    def test_other_plugins_still_notified(self, tmp_path: Path) -> None:
        recorder = RecordingPlugin()
        ledger = _ledger_with(tmp_path, recorder, BrokenPlugin())
        try:
            result = WarehouseService(ledger).add_warehouse("North")
        finally:
            ledger.close()
        assert result.ok
        assert recorder.calls == [("post_add_warehouse", {"warehouse_id": 0, "name": "North"})]
