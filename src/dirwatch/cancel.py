"""Cooperative cancellation signal shared between a caller and a watch session."""
from __future__ import annotations

import threading
from typing import Optional

from .errors import WatchCancelled


class CancelSignal:
    """A one-shot flag that can be queried, waited on and carries a reason."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: Optional[WatchCancelled] = None

    def cancel(self, reason: str = "cancelled") -> None:
        """Fire the signal. Only the first reason is kept."""

        with self._lock:
            if self._reason is None:
                self._reason = WatchCancelled(reason)
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or ``timeout`` elapses; True if cancelled."""

        return self._event.wait(timeout)

    def err(self) -> Optional[WatchCancelled]:
        if not self._event.is_set():
            return None
        return self._reason

    def raise_if_cancelled(self) -> None:
        error = self.err()
        if error is not None:
            raise error
