"""Fixed-period tick source for the polling loop."""
from __future__ import annotations

import time
from typing import Callable

from .cancel import CancelSignal


class Ticker:
    """Fires on a fixed grid of ``start + k * interval`` deadlines.

    A consumer that falls behind gets one immediate tick; the other missed
    deadlines are dropped rather than delivered as a burst.
    """

    def __init__(self, interval: float, *, clock: Callable[[], float] = time.monotonic):
        if interval <= 0:
            raise ValueError(f"Ticker interval must be positive, got {interval!r}")
        self._interval = interval
        self._clock = clock
        self._next_deadline = clock() + interval

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def next_deadline(self) -> float:
        return self._next_deadline

    def wait(self, cancel: CancelSignal) -> bool:
        """Block until the next tick. Returns False if ``cancel`` fires first."""

        if cancel.is_cancelled():
            return False
        remaining = self._next_deadline - self._clock()
        if remaining > 0 and cancel.wait(remaining):
            return False

        now = self._clock()
        self._next_deadline += self._interval
        if self._next_deadline <= now:
            skipped = int((now - self._next_deadline) // self._interval) + 1
            self._next_deadline += skipped * self._interval
        return True
