"""Command group: stock ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from stockctl.commands._base import ID, QUANTITY, StockGroup

if TYPE_CHECKING:
    from stockctl.commands._context import AppContext


@click.group(
    cls=StockGroup,
    examples="""\
  stockctl stock add 0 bolts 100
  stockctl stock decrement 4 25
  stockctl stock transfer 4 --from 0 --to 1 10
  stockctl stock list 0""",
)
def stock() -> None:
    """Add, remove, move, and inspect stock items."""


@stock.command(
    examples="""\
  stockctl stock get 4
  stockctl --json stock get 4""",
)
@click.argument("item_id", type=ID)
@click.pass_obj
def get(app: AppContext, item_id: int) -> None:
    """Show the stock item stored under ITEM_ID."""
    from stockctl.services.stock import StockService

    app.emit(StockService(app.ledger).get_stock_item(item_id))


@stock.command(
    examples="""\
  stockctl stock add 0 bolts 100
  stockctl stock add 0 "hex nuts" 250""",
)
@click.argument("warehouse_id", type=ID)
@click.argument("item_name")
@click.argument("quantity", type=QUANTITY)
@click.pass_obj
def add(app: AppContext, warehouse_id: int, item_name: str, quantity: int) -> None:
    """Put QUANTITY of ITEM_NAME into WAREHOUSE_ID.

    An item already held under the same name grows instead of being duplicated.
    """
    from stockctl.services.stock import StockService

    app.emit(StockService(app.ledger).add_stock_item(warehouse_id, item_name, quantity))


@stock.command(
    examples="""\
  stockctl stock decrement 4 25
  stockctl --json stock decrement 4 25""",
)
@click.argument("item_id", type=ID)
@click.argument("quantity", type=QUANTITY)
@click.pass_obj
def decrement(app: AppContext, item_id: int, quantity: int) -> None:
    """Take QUANTITY out of ITEM_ID; the item is removed when it reaches zero."""
    from stockctl.services.stock import StockService

    app.emit(StockService(app.ledger).decrement_stock_item(item_id, quantity))


@stock.command(
    examples="""\
  stockctl stock transfer 4 --from 0 --to 1 10
  stockctl -v stock transfer 4 --from 0 --to 1 10""",
)
@click.argument("item_id", type=ID)
@click.option("--from", "from_warehouse_id", type=ID, required=True, help="Source warehouse.")
@click.option("--to", "to_warehouse_id", type=ID, required=True, help="Destination warehouse.")
@click.argument("quantity", type=QUANTITY)
@click.pass_obj
def transfer(
    app: AppContext,
    item_id: int,
    from_warehouse_id: int,
    to_warehouse_id: int,
    quantity: int,
) -> None:
    """Move QUANTITY of ITEM_ID from one warehouse to another."""
    from stockctl.services.stock import StockService

    app.emit(
        StockService(app.ledger).transfer_stock_item(
            item_id, from_warehouse_id, to_warehouse_id, quantity
        )
    )


@stock.command(
    "list",
    examples="""\
  stockctl stock list 0
  stockctl -q stock list 0""",
)
@click.argument("warehouse_id", type=ID)
@click.pass_obj
def list_cmd(app: AppContext, warehouse_id: int) -> None:
    """List the stock held by WAREHOUSE_ID."""
    from stockctl.services.stock import StockService

    app.emit(StockService(app.ledger).list_stock_by_warehouse(warehouse_id))
