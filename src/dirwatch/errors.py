"""Exceptions raised by the watcher and its collaborators."""
from __future__ import annotations

from typing import Optional


class WatchError(Exception):
    """Base class for watcher failures."""


class DirectoryNotFoundError(WatchError):
    """Raised when the watched root does not exist at call time."""

    def __init__(self, path: str):
        super().__init__(f"Directory does not exist: {path}")
        self.path = path


class EnumerationError(WatchError):
    """Raised when a tree walk fails; the underlying OSError is the cause."""

    def __init__(self, path: str, error: Optional[BaseException] = None):
        detail = f": {error}" if error is not None else ""
        super().__init__(f"Failed to enumerate {path}{detail}")
        self.path = path


class WatchCancelled(WatchError):
    """Reason carried by a cancelled signal."""


class ChannelClosedError(WatchError):
    """Raised when sending to or receiving from a closed event channel."""
