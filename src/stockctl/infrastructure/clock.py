"""Strictly increasing nanosecond clock for record timestamps."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable


class MonotonicClock:
    """Wall-clock nanoseconds that never repeat or go backwards.

    If the system clock stalls or steps back, each call still returns
    one more than the previous value.
    """

    def __init__(self, source: Callable[[], int] = time.time_ns) -> None:
        self._source = source
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            now = self._source()
            if now <= self._last:
                now = self._last + 1
            self._last = now
            return now
