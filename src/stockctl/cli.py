"""Entry point: the ``stockctl`` command group and its global flags."""

from __future__ import annotations

from typing import Any

import click

from stockctl import __version__
from stockctl.commands import register_commands
from stockctl.commands._base import LIMIT_NOTE
from stockctl.commands._context import AppContext
from stockctl.config.settings import StockSettings


@click.group(invoke_without_command=True, epilog=LIMIT_NOTE)
@click.version_option(version=__version__, prog_name="stockctl")
@click.option("-c", "--config", "config_path", default=None, help="Use this stockctl.toml.")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only ids or OK/ERROR lines.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and stage timings.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, **flags: Any) -> None:
    """stockctl: a warehouse inventory ledger."""
    settings = StockSettings.from_cli(config_path=config_path, **flags)
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
