"""Command: ledger integrity checking."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from stockctl.commands._base import StockCommand

if TYPE_CHECKING:
    from stockctl.commands._context import AppContext


@click.command(
    cls=StockCommand,
    examples="""\
  stockctl check
  stockctl check --errors-only
  stockctl --json check --min-severity error""",
)
@click.option(
    "--min-severity",
    type=click.Choice(["warning", "error"]),
    default="warning",
    help="Hide issues below this severity.",
)
@click.option("--errors-only", is_flag=True, help="Shortcut for --min-severity error.")
@click.pass_obj
def check(app: AppContext, min_severity: str, errors_only: bool) -> None:
    """Check ledger integrity without modifying anything."""
    from stockctl.services.check import CheckService

    threshold = "error" if errors_only else min_severity
    app.emit(CheckService(app.ledger).check(min_severity=threshold))
