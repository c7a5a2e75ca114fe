"""Tests for WarehouseService — the warehouse registry."""

from __future__ import annotations

from stockctl.domain.types import Namespace
from stockctl.infrastructure.ledger import Ledger
from stockctl.services.stock import StockService
from stockctl.services.warehouse import WarehouseService
from tests.conftest import add_stock, add_warehouse


class TestGetWarehouse:
    def test_get_existing(self, ledger: Ledger) -> None:
        created = add_warehouse(ledger, "North")
        result = WarehouseService(ledger).get_warehouse(created["id"])
        assert result.ok
        assert result.data == created

    def test_get_missing(self, ledger: Ledger) -> None:
        result = WarehouseService(ledger).get_warehouse(9)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.message == "A warehouse with id=9 not found"
        assert result.error.detail == {"warehouse_id": 9}


class TestAddWarehouse:
    def test_ids_start_at_zero(self, ledger: Ledger) -> None:
        assert add_warehouse(ledger, "A")["id"] == 0
        assert add_warehouse(ledger, "B")["id"] == 1

    def test_records_name_and_timestamp(self, ledger: Ledger) -> None:
        data = add_warehouse(ledger, "North")
        assert data["name"] == "North"
        assert data["created_at"] > 0

    def test_duplicate_names_allowed(self, ledger: Ledger) -> None:
        a = add_warehouse(ledger, "Depot")
        b = add_warehouse(ledger, "Depot")
        assert a["id"] != b["id"]

    def test_blank_name_rejected(self, ledger: Ledger) -> None:
        result = WarehouseService(ledger).add_warehouse("   ")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_INPUT"
        with ledger.snapshot() as view:
            assert view.pool(Namespace.WAREHOUSE) == (0, [])

    def test_reuses_lowest_released_id(self, ledger: Ledger) -> None:
        svc = WarehouseService(ledger)
        for name in "ABCD":
            add_warehouse(ledger, name)
        svc.delete_warehouse(2)
        svc.delete_warehouse(0)
        assert add_warehouse(ledger, "E")["id"] == 0
        assert add_warehouse(ledger, "F")["id"] == 2
        assert add_warehouse(ledger, "G")["id"] == 4


class TestDeleteWarehouse:
    def test_delete_missing(self, ledger: Ledger) -> None:
        result = WarehouseService(ledger).delete_warehouse(3)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_id_beyond_sqlite_range_is_not_found(self, ledger: Ledger) -> None:
        service = WarehouseService(ledger)
        assert service.delete_warehouse(2**63).error.code == "NOT_FOUND"
        assert service.get_warehouse(2**64 - 1).error.code == "NOT_FOUND"

    def test_delete_returns_removed_warehouse(self, ledger: Ledger) -> None:
        wid = add_warehouse(ledger, "North")["id"]
        result = WarehouseService(ledger).delete_warehouse(wid)
        assert result.ok
        assert result.data["name"] == "North"
        assert result.data["removed_count"] == 0
        assert not WarehouseService(ledger).get_warehouse(wid).ok

    def test_cascades_to_stock(self, ledger: Ledger) -> None:
        keep = add_warehouse(ledger, "Keep")["id"]
        drop = add_warehouse(ledger, "Drop")["id"]
        kept = add_stock(ledger, keep, "bolts", 5)
        gone_a = add_stock(ledger, drop, "bolts", 5)
        gone_b = add_stock(ledger, drop, "nuts", 7)

        result = WarehouseService(ledger).delete_warehouse(drop)
        assert result.ok
        assert result.data["removed_count"] == 2
        assert [i["item_id"] for i in result.data["removed_items"]] == [
            gone_a["item_id"],
            gone_b["item_id"],
        ]

        stock = StockService(ledger)
        assert stock.get_stock_item(kept["item_id"]).ok
        assert not stock.get_stock_item(gone_a["item_id"]).ok
        assert not stock.get_stock_item(gone_b["item_id"]).ok

    def test_cascade_releases_item_ids(self, ledger: Ledger) -> None:
        wid = add_warehouse(ledger)["id"]
        add_stock(ledger, wid, "a", 1)
        add_stock(ledger, wid, "b", 1)
        WarehouseService(ledger).delete_warehouse(wid)
        with ledger.snapshot() as view:
            next_value, recycled = view.pool(Namespace.ITEM)
        assert next_value == 2
        assert sorted(recycled) == [0, 1]

    def test_second_delete_fails(self, ledger: Ledger) -> None:
        wid = add_warehouse(ledger)["id"]
        svc = WarehouseService(ledger)
        assert svc.delete_warehouse(wid).ok
        assert not svc.delete_warehouse(wid).ok
        with ledger.snapshot() as view:
            assert view.pool(Namespace.WAREHOUSE) == (1, [0])


class TestListWarehousesWithStock:
    def test_empty(self, ledger: Ledger) -> None:
        result = WarehouseService(ledger).list_warehouses_with_stock()
        assert result.ok
        assert result.data == {"items": [], "count": 0}

    def test_pairs_each_warehouse_with_its_stock(self, ledger: Ledger) -> None:
        a = add_warehouse(ledger, "A")["id"]
        b = add_warehouse(ledger, "B")["id"]
        c = add_warehouse(ledger, "C")["id"]
        add_stock(ledger, a, "bolts", 3)
        add_stock(ledger, c, "nuts", 4)
        add_stock(ledger, a, "washers", 2)

        result = WarehouseService(ledger).list_warehouses_with_stock()
        entries = result.data["items"]
        assert [e["id"] for e in entries] == [a, b, c]
        assert [i["item_name"] for i in entries[0]["stock"]] == ["bolts", "washers"]
        assert entries[0]["total_quantity"] == 5
        assert entries[1]["stock"] == []
        assert entries[1]["total_quantity"] == 0
        assert entries[2]["stock"][0]["quantity"] == 4
