"""Pluggy hook specifications for stockctl ledger lifecycle events.

Every hook fires after its operation has committed, in the calling
thread. Payloads are plain ids, names and quantities.
"""

from __future__ import annotations

import pluggy

PROJECT_NAME = "stockctl"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class StockctlHookSpec:
    """Hook specifications for the stockctl plugin system."""

    @hookspec
    def post_add_warehouse(self, warehouse_id: int, name: str) -> None:
        """Called after a warehouse is created."""

    @hookspec
    def post_delete_warehouse(
        self,
        warehouse_id: int,
        name: str,
        removed_item_ids: list[int],
    ) -> None:
        """Called after a warehouse and its stock are deleted."""

    @hookspec
    def post_add_stock(
        self,
        item_id: int,
        warehouse_id: int,
        item_name: str,
        quantity: int,
        merged: bool,
    ) -> None:
        """Called after stock is added (new record or merge)."""

    @hookspec
    def post_decrement_stock(
        self,
        item_id: int,
        warehouse_id: int,
        quantity: int,
        remaining: int,
        removed: bool,
    ) -> None:
        """Called after a stock item is decremented."""

    @hookspec
    def post_transfer_stock(
        self,
        source_item_id: int,
        destination_item_id: int,
        from_warehouse_id: int,
        to_warehouse_id: int,
        item_name: str,
        quantity: int,
    ) -> None:
        """Called after stock moves between warehouses."""

    @hookspec
    def post_check(self, issues_found: int) -> None:
        """Called after an integrity check."""
