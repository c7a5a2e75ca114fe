"""Click classes and parameter types shared by stockctl commands.

Commands and groups built on :class:`StockCommand` / :class:`StockGroup`
take an ``examples=`` text, exposed as an eager ``--examples`` flag, and
close their help with the numeric limit note.
"""

from __future__ import annotations

from typing import Any

import click

from stockctl.domain.models import MAX_ID, MAX_QUANTITY

LIMIT_NOTE = f"Ids and quantities are whole numbers from 0 to {MAX_ID} (2**63-1)."

ID = click.IntRange(min=0, max=MAX_ID)
QUANTITY = click.IntRange(min=0, max=MAX_QUANTITY)


def _examples_option(examples: str) -> click.Option:
    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{examples}")
            ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show usage examples.",
    )


class _ExamplesMixin:
    params: list[click.Parameter]

    def _setup_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))


class StockCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("epilog", LIMIT_NOTE)
        super().__init__(*args, **kwargs)
        self._setup_examples(examples)


class StockGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`StockCommand`."""

    command_class = StockCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("epilog", LIMIT_NOTE)
        super().__init__(*args, **kwargs)
        self._setup_examples(examples)
