"""Command groups for the stockctl CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach the ``warehouse`` and ``stock`` groups and the ``check`` command."""
    from stockctl.commands.check import check
    from stockctl.commands.stock import stock
    from stockctl.commands.warehouse import warehouse

    for command in (warehouse, stock, check):
        cli.add_command(command)
