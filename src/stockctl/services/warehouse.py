"""WarehouseService — the warehouse registry.

Owns warehouse records: lookup, creation, cascading deletion, and the
warehouse-with-stock listing. Every mutation runs in one ledger
transaction, so a warehouse and the stock it held disappear together.

Pipeline for mutations: VALIDATE → PERSIST → EVENT → RESPOND
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any

from stockctl.domain.models import StockItem, Warehouse, record_data, validate_warehouse_name
from stockctl.domain.types import ErrorCode, Namespace
from stockctl.services.base import BaseService
from stockctl.services.result import ServiceResult
from stockctl.services.telemetry import stage, traced

logger = logging.getLogger(__name__)


def warehouse_not_found(op: str, warehouse_id: int) -> ServiceResult:
    """Failure result for an unknown warehouse id."""
    return ServiceResult.failure(
        op,
        ErrorCode.NOT_FOUND,
        f"A warehouse with id={warehouse_id} not found",
        warehouse_id=warehouse_id,
    )


class WarehouseService(BaseService):
    """Handles warehouse lookup, creation, deletion, and listing."""

    @traced
    def get_warehouse(self, warehouse_id: int) -> ServiceResult:
        """Return the warehouse stored under *warehouse_id*."""
        op = "get_warehouse"
        with self._ledger.snapshot() as view:
            warehouse = view.warehouses.get(warehouse_id)
        if warehouse is None:
            return warehouse_not_found(op, warehouse_id)
        return ServiceResult(ok=True, op=op, data=record_data(warehouse))

    @traced
    def add_warehouse(self, name: str) -> ServiceResult:
        """Create a warehouse under a freshly allocated (or recycled) id."""
        op = "add_warehouse"
        warnings: list[str] = []

        # ── VALIDATE ──────────────────────────────────────────────
        with stage("validate"):
            vr = validate_warehouse_name(name)
            if not vr.valid:
                return ServiceResult.failure(op, ErrorCode.INVALID_INPUT, "; ".join(vr.errors))

        # ── PERSIST ───────────────────────────────────────────────
        with stage("persist"), self._ledger.transaction() as txn:
            warehouse_id = txn.allocate(Namespace.WAREHOUSE)
            warehouse = Warehouse(id=warehouse_id, name=name, created_at=txn.now())
            txn.warehouses.insert(warehouse_id, warehouse)

        logger.info("Added warehouse %d (%s)", warehouse.id, warehouse.name)

        # ── EVENT ─────────────────────────────────────────────────
        with stage("notify"):
            self._notify(
                "post_add_warehouse", warnings, warehouse_id=warehouse.id, name=warehouse.name
            )

        return ServiceResult(ok=True, op=op, data=record_data(warehouse), warnings=warnings)

    @traced
    def delete_warehouse(self, warehouse_id: int) -> ServiceResult:
        """Remove a warehouse and every stock item that references it.

        Both identifier namespaces get the freed ids back. The warehouse
        removal and the stock cascade share one transaction.
        """
        op = "delete_warehouse"
        warnings: list[str] = []

        with stage("cascade"), self._ledger.transaction() as txn:
            warehouse = txn.warehouses.remove(warehouse_id)
            if warehouse is None:
                return warehouse_not_found(op, warehouse_id)
            txn.release(Namespace.WAREHOUSE, warehouse_id)

            removed: list[StockItem] = []
            for item in txn.items_in(warehouse_id):
                txn.items.remove(item.item_id)
                txn.release(Namespace.ITEM, item.item_id)
                removed.append(item)

        removed_ids = [item.item_id for item in removed]
        logger.info(
            "Deleted warehouse %d with %d stock item(s)", warehouse_id, len(removed_ids)
        )

        with stage("notify"):
            self._notify(
                "post_delete_warehouse",
                warnings,
                warehouse_id=warehouse.id,
                name=warehouse.name,
                removed_item_ids=removed_ids,
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                **record_data(warehouse),
                "removed_items": [record_data(item) for item in removed],
                "removed_count": len(removed),
            },
            warnings=warnings,
        )

    @traced
    def list_warehouses_with_stock(self) -> ServiceResult:
        """Every warehouse in ascending id order, paired with its stock."""
        op = "list_warehouses_with_stock"
        with self._ledger.snapshot() as view:
            all_warehouses = list(view.warehouses.iterate())
            by_warehouse: dict[int, list[StockItem]] = defaultdict(list)
            for item in view.items.iterate():
                by_warehouse[item.warehouse_id].append(item)

        entries: list[dict[str, Any]] = []
        for warehouse in all_warehouses:
            stock = by_warehouse.get(warehouse.id, [])
            entries.append(
                {
                    **record_data(warehouse),
                    "stock": [record_data(item) for item in stock],
                    "total_quantity": sum(item.quantity for item in stock),
                }
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={"items": entries, "count": len(entries)},
        )
