"""StockService — the stock ledger.

Owns stock-item records and the rules that keep them consistent:

- **Merge-on-insert**: adding a name already held by the warehouse grows
  the existing record instead of creating a duplicate.
- **Zero removal**: a record whose quantity reaches zero is deleted and
  its id returned to the item pool.
- **Transfer**: moves part of a record to another warehouse, following
  the same merge and zero-removal rules on each side.

INVARIANT: every failure condition is checked before the first write,
so a failed call leaves the ledger exactly as it was.

Pipeline for mutations: VALIDATE → PERSIST → EVENT → RESPOND
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from stockctl.domain.models import (
    MAX_QUANTITY,
    StockItem,
    record_data,
    validate_quantity,
    validate_stock_create,
)
from stockctl.domain.types import ErrorCode, Namespace
from stockctl.services.base import BaseService
from stockctl.services.result import ServiceResult
from stockctl.services.telemetry import stage, traced
from stockctl.services.warehouse import warehouse_not_found

if TYPE_CHECKING:
    from stockctl.infrastructure.ledger import LedgerTransaction

logger = logging.getLogger(__name__)


def item_not_found(op: str, item_id: int) -> ServiceResult:
    """Failure result for an unknown stock item id."""
    return ServiceResult.failure(
        op,
        ErrorCode.NOT_FOUND,
        f"Item with id={item_id} not found",
        item_id=item_id,
    )


def not_enough_stock(op: str, item: StockItem, requested: int) -> ServiceResult:
    """Failure result when *requested* exceeds what *item* holds."""
    return ServiceResult.failure(
        op,
        ErrorCode.NOT_ENOUGH_STOCK,
        f"Not enough stock for item_id={item.item_id}, "
        f"available={item.quantity}, requested={requested}",
        item_id=item.item_id,
        available=item.quantity,
        requested=requested,
    )


def _merge_overflow(op: str, item: StockItem, quantity: int) -> ServiceResult:
    return ServiceResult.failure(
        op,
        ErrorCode.INVALID_INPUT,
        f"Adding {quantity} to item_id={item.item_id} would exceed {MAX_QUANTITY}",
        item_id=item.item_id,
        available=item.quantity,
        requested=quantity,
    )


class StockService(BaseService):
    """Handles stock lookup, insertion, decrement, and transfer."""

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @traced
    def get_stock_item(self, item_id: int) -> ServiceResult:
        """Return the stock item stored under *item_id*."""
        op = "get_stock_item"
        with self._ledger.snapshot() as view:
            item = view.items.get(item_id)
        if item is None:
            return item_not_found(op, item_id)
        return ServiceResult(ok=True, op=op, data=record_data(item))

    @traced
    def list_stock_by_warehouse(self, warehouse_id: int) -> ServiceResult:
        """All items held by *warehouse_id*, ascending item id.

        An unknown warehouse simply holds nothing.
        """
        op = "list_stock_by_warehouse"
        with self._ledger.snapshot() as view:
            items = view.items_in(warehouse_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "warehouse_id": warehouse_id,
                "items": [record_data(item) for item in items],
                "count": len(items),
                "total_quantity": sum(item.quantity for item in items),
            },
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @traced
    def add_stock_item(self, warehouse_id: int, item_name: str, quantity: int) -> ServiceResult:
        """Put *quantity* of *item_name* into *warehouse_id*.

        Merges into the warehouse's existing record of the same name when
        there is one; otherwise allocates a new item id.
        """
        op = "add_stock_item"
        warnings: list[str] = []

        with stage("validate"):
            vr = validate_stock_create(item_name, quantity)
            if not vr.valid:
                return ServiceResult.failure(
                    op, ErrorCode.INVALID_INPUT, "; ".join(vr.errors), warehouse_id=warehouse_id
                )

        with stage("persist"), self._ledger.transaction() as txn:
            if not txn.warehouses.contains(warehouse_id):
                return warehouse_not_found(op, warehouse_id)

            existing = txn.find_item(warehouse_id, item_name)
            if existing is not None and existing.quantity + quantity > MAX_QUANTITY:
                return _merge_overflow(op, existing, quantity)

            item, merged = self._put(txn, warehouse_id, item_name, quantity, existing)

        logger.info(
            "%s %d x %r in warehouse %d (item %d)",
            "Merged" if merged else "Added",
            quantity,
            item_name,
            warehouse_id,
            item.item_id,
        )

        with stage("notify"):
            self._notify(
                "post_add_stock",
                warnings,
                item_id=item.item_id,
                warehouse_id=warehouse_id,
                item_name=item_name,
                quantity=quantity,
                merged=merged,
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={**record_data(item), "merged": merged},
            warnings=warnings,
        )

    @traced
    def decrement_stock_item(self, item_id: int, quantity: int) -> ServiceResult:
        """Take *quantity* out of an item; a record that hits zero is removed.

        Returns the post-decrement state (quantity 0 when removed).
        """
        op = "decrement_stock_item"
        warnings: list[str] = []

        with stage("validate"):
            vr = validate_quantity(quantity)
            if not vr.valid:
                return ServiceResult.failure(
                    op, ErrorCode.INVALID_INPUT, "; ".join(vr.errors), item_id=item_id
                )

        with stage("persist"), self._ledger.transaction() as txn:
            item = txn.items.get(item_id)
            if item is None:
                return item_not_found(op, item_id)
            if quantity > item.quantity:
                return not_enough_stock(op, item, quantity)

            after, removed = self._take(txn, item, quantity)

        logger.info(
            "Decremented item %d by %d (remaining %d%s)",
            item_id,
            quantity,
            after.quantity,
            ", removed" if removed else "",
        )

        with stage("notify"):
            self._notify(
                "post_decrement_stock",
                warnings,
                item_id=item_id,
                warehouse_id=after.warehouse_id,
                quantity=quantity,
                remaining=after.quantity,
                removed=removed,
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={**record_data(after), "removed": removed},
            warnings=warnings,
        )

    @traced
    def transfer_stock_item(
        self,
        item_id: int,
        from_warehouse_id: int,
        to_warehouse_id: int,
        quantity: int,
    ) -> ServiceResult:
        """Move *quantity* of an item from one warehouse to another.

        The source is decremented (and removed at zero); the destination
        merges into its same-named record or gets a new one. Both sides are
        written in one transaction after all checks pass.
        """
        op = "transfer_stock_item"
        warnings: list[str] = []

        with stage("validate"):
            vr = validate_quantity(quantity)
            if not vr.valid:
                return ServiceResult.failure(
                    op, ErrorCode.INVALID_INPUT, "; ".join(vr.errors), item_id=item_id
                )
            if from_warehouse_id == to_warehouse_id:
                return ServiceResult.failure(
                    op,
                    ErrorCode.INVALID_INPUT,
                    f"Cannot transfer item_id={item_id} into its own "
                    f"warehouse id={from_warehouse_id}",
                item_id=item_id,
                warehouse_id=from_warehouse_id,
                )

        with stage("persist"), self._ledger.transaction() as txn:
            source = txn.items.get(item_id)
            if source is None:
                return item_not_found(op, item_id)
            if source.warehouse_id != from_warehouse_id:
                return ServiceResult.failure(
                    op,
                    ErrorCode.NOT_FOUND,
                    f"Item with id={item_id} not found in warehouse id={from_warehouse_id}",
                item_id=item_id,
                warehouse_id=from_warehouse_id,
                actual_warehouse_id=source.warehouse_id,
                )
            if not txn.warehouses.contains(to_warehouse_id):
                return warehouse_not_found(op, to_warehouse_id)
            if source.quantity < quantity:
                return not_enough_stock(op, source, quantity)

            existing = txn.find_item(to_warehouse_id, source.item_name)
            if existing is not None and existing.quantity + quantity > MAX_QUANTITY:
                return _merge_overflow(op, existing, quantity)

            # Destination first: a source id released at zero must not be
            # handed straight back out as the destination id.
            destination, merged = self._put(
                txn, to_warehouse_id, source.item_name, quantity, existing
            )
            source_after, source_removed = self._take(txn, source, quantity)

        logger.info(
            "Transferred %d x %r from warehouse %d (item %d) to warehouse %d (item %d)",
            quantity,
            source.item_name,
            from_warehouse_id,
            item_id,
            to_warehouse_id,
            destination.item_id,
        )

        with stage("notify"):
            self._notify(
                "post_transfer_stock",
                warnings,
                source_item_id=item_id,
                destination_item_id=destination.item_id,
                from_warehouse_id=from_warehouse_id,
                to_warehouse_id=to_warehouse_id,
                item_name=source.item_name,
                quantity=quantity,
            )

        data: dict[str, Any] = {
            "quantity": quantity,
            "source": record_data(source_after),
            "source_removed": source_removed,
            "destination": record_data(destination),
            "merged": merged,
        }
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    # ------------------------------------------------------------------
    # Write helpers (callers have already validated)
    # ------------------------------------------------------------------

    @staticmethod
    def _put(
        txn: LedgerTransaction,
        warehouse_id: int,
        item_name: str,
        quantity: int,
        existing: StockItem | None,
    ) -> tuple[StockItem, bool]:
        """Merge into *existing* or create a new record. Returns (item, merged)."""
        if existing is not None:
            merged = existing.model_copy(
                update={"quantity": existing.quantity + quantity, "updated_at": txn.now()}
            )
            txn.items.insert(merged.item_id, merged)
            return merged, True

        new_id = txn.allocate(Namespace.ITEM)
        item = StockItem(
            item_id=new_id,
            warehouse_id=warehouse_id,
            item_name=item_name,
            quantity=quantity,
            created_at=txn.now(),
            updated_at=None,
        )
        txn.items.insert(new_id, item)
        return item, False

    @staticmethod
    def _take(txn: LedgerTransaction, item: StockItem, quantity: int) -> tuple[StockItem, bool]:
        """Subtract *quantity* from *item*. Returns (post-state, removed)."""
        after = item.model_copy(
            update={"quantity": item.quantity - quantity, "updated_at": txn.now()}
        )
        if after.quantity == 0:
            txn.items.remove(item.item_id)
            txn.release(Namespace.ITEM, item.item_id)
            return after, True
        txn.items.insert(item.item_id, after)
        return after, False
