"""Command group: warehouse registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from stockctl.commands._base import ID, StockGroup

if TYPE_CHECKING:
    from stockctl.commands._context import AppContext


@click.group(
    cls=StockGroup,
    examples="""\
  stockctl warehouse add "North depot"
  stockctl warehouse get 0
  stockctl warehouse list
  stockctl --json warehouse delete 3""",
)
def warehouse() -> None:
    """Create, inspect, and remove warehouses."""


@warehouse.command(
    examples="""\
  stockctl warehouse get 0
  stockctl --json warehouse get 0""",
)
@click.argument("warehouse_id", type=ID)
@click.pass_obj
def get(app: AppContext, warehouse_id: int) -> None:
    """Show the warehouse stored under WAREHOUSE_ID."""
    from stockctl.services.warehouse import WarehouseService

    app.emit(WarehouseService(app.ledger).get_warehouse(warehouse_id))


@warehouse.command(
    examples="""\
  stockctl warehouse add "North depot"
  stockctl -q warehouse add Overflow""",
)
@click.argument("name")
@click.pass_obj
def add(app: AppContext, name: str) -> None:
    """Register a new warehouse called NAME."""
    from stockctl.services.warehouse import WarehouseService

    app.emit(WarehouseService(app.ledger).add_warehouse(name))


@warehouse.command(
    examples="""\
  stockctl warehouse delete 3
  stockctl -v warehouse delete 3""",
)
@click.argument("warehouse_id", type=ID)
@click.pass_obj
def delete(app: AppContext, warehouse_id: int) -> None:
    """Delete a warehouse and all of its stock."""
    from stockctl.services.warehouse import WarehouseService

    app.emit(WarehouseService(app.ledger).delete_warehouse(warehouse_id))


@warehouse.command(
    "list",
    examples="""\
  stockctl warehouse list
  stockctl -q warehouse list
  stockctl --json warehouse list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List every warehouse together with its stock."""
    from stockctl.services.warehouse import WarehouseService

    app.emit(WarehouseService(app.ledger).list_warehouses_with_stock())
