"""structlog setup for stockctl.

Service modules log through ``logging.getLogger(__name__)``; those
records run through the same structlog processors as native structlog
loggers, so ``--log-json`` gives one JSON object per line for both.
Everything goes to stderr, leaving stdout for command results.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

# Chatty at DEBUG even when stockctl itself is verbose.
_QUIET_LIBRARIES = ("sqlalchemy", "pluggy")


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _output_chain(log_json: bool) -> list[Processor]:
    if log_json:
        return [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    return [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
    ]


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route stdlib and structlog output through one stderr handler.

    The ``stockctl`` logger is at DEBUG with *verbose*, WARNING otherwise.
    Safe to call repeatedly: the root handler is replaced, not added.
    """
    pre_chain = _pre_chain()
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=_output_chain(log_json),
        )
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("stockctl").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_ledger(name: str) -> None:
    """Tag every following log line with the ledger's configured name."""
    structlog.contextvars.bind_contextvars(ledger=name)
