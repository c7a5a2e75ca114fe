"""Click context object shared by every stockctl command."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from stockctl.config.logging import bind_ledger, configure_logging
from stockctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from stockctl.config.settings import StockSettings
    from stockctl.infrastructure.ledger import Ledger
    from stockctl.services.result import ServiceResult


class AppContext:
    """Settings, the lazily opened ledger, and result emission.

    Nothing touches the database until a command asks for :attr:`ledger`,
    so ``--help`` and ``--version`` stay side-effect free.
    """

    def __init__(self, settings: StockSettings) -> None:
        self.settings = settings
        self._ledger: Ledger | None = None

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        bind_ledger(settings.ledger.name)
        if settings.verbose:
            from stockctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def ledger(self) -> Ledger:
        if self._ledger is None:
            from stockctl.infrastructure.ledger import Ledger
            from stockctl.plugins.hooks import LedgerHooks

            hooks = LedgerHooks.from_config(self.settings.hooks)
            self._ledger = Ledger(self.settings, hooks=hooks)
        return self._ledger

    def close(self) -> None:
        if self._ledger is not None:
            self._ledger.close()
            self._ledger = None

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and exit 1 if it failed.

        Successful output goes to stdout with warnings on stderr; failures
        go entirely to stderr.
        """
        fmt = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        rendered = format_result(result, settings=fmt)
        if not result.ok:
            click.echo(rendered, err=True)
            raise SystemExit(1)
        click.echo(rendered)
        if not fmt.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
