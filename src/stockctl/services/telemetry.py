"""Per-operation stage timings for ``--verbose`` output.

A ``@traced`` service method records how long each ``stage(...)`` block
inside it took. When telemetry is on, the result carries::

    meta["telemetry"] = {
        "operation": "WarehouseService.add_warehouse",
        "duration_ms": 1.42,
        "stages": [{"name": "validate", "duration_ms": 0.01}, ...],
    }

Stages are flat and listed in the order they finished. With telemetry off
both helpers cost one ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from stockctl.services.result import ServiceResult

log = structlog.get_logger("stockctl.telemetry")

_enabled: ContextVar[bool] = ContextVar("stockctl_telemetry", default=False)
_active: ContextVar[OperationTiming | None] = ContextVar("stockctl_timing", default=None)


def _elapsed_ms(since: float) -> float:
    return round((time.perf_counter() - since) * 1000, 2)


@dataclass
class OperationTiming:
    """Stage timings collected while one traced operation runs."""

    operation: str
    started: float = field(default_factory=time.perf_counter)
    stages: list[dict[str, Any]] = field(default_factory=list)

    def record(self, name: str, duration_ms: float) -> None:
        self.stages.append({"name": name, "duration_ms": duration_ms})

    def summary(self) -> dict[str, Any]:
        return {
            "operation": self.operation,
            "duration_ms": _elapsed_ms(self.started),
            "stages": list(self.stages),
        }


@contextmanager
def stage(name: str) -> Iterator[None]:
    """Time the enclosed block as a stage of the running operation."""
    timing = _active.get()
    if timing is None:
        yield
        return
    began = time.perf_counter()
    try:
        yield
    finally:
        timing.record(name, _elapsed_ms(began))


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Collect stage timings for *func* and attach them to its ServiceResult."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        timing = OperationTiming(operation=func.__qualname__)
        token = _active.set(timing)
        try:
            result = func(*args, **kwargs)
        finally:
            _active.reset(token)

        summary = timing.summary()
        log.debug("operation.timed", **summary)
        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": summary}
            result = result.model_copy(update={"meta": meta})  # type: ignore[assignment]
        return result

    return wrapper


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def telemetry_enabled() -> bool:
    return _enabled.get()
