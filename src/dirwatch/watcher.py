"""Polling directory watcher that emits create/remove events."""
from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, FrozenSet, Iterable, List, Optional, Set, Union

from .cancel import CancelSignal
from .enumerator import TreeEnumerator, walk_tree
from .errors import DirectoryNotFoundError, EnumerationError, WatchCancelled
from .events import EventType, FileEvent
from .sink import EventChannel, EventSink
from .ticker import Ticker

logger = logging.getLogger(__name__)

Snapshot = FrozenSet[str]


@dataclass
class WatchStats:
    """Counters kept for one watch session."""

    cycles: int = 0
    events_emitted: int = 0


class DirWatcher:
    """Polls a directory tree and emits events for files that appear or disappear."""

    def __init__(
        self,
        refresh_interval: float,
        *,
        sink: Optional[EventSink] = None,
        enumerator: TreeEnumerator = walk_tree,
    ):
        if refresh_interval <= 0:
            raise ValueError(f"refresh_interval must be positive, got {refresh_interval!r}")
        self._refresh_interval = refresh_interval
        self._enumerator = enumerator
        self.events: EventSink = sink if sink is not None else EventChannel()

    @property
    def refresh_interval(self) -> float:
        return self._refresh_interval

    def watch_dir(self, cancel: CancelSignal, path: Union[str, Path]) -> None:
        """Watch ``path`` until cancelled or the directory disappears.

        The initial scan is a baseline and emits nothing. Raises
        ``DirectoryNotFoundError`` if ``path`` is missing at call time and
        ``EnumerationError`` if a scan fails.
        """

        root = os.fspath(path)
        if not _root_exists(root):
            raise DirectoryNotFoundError(root)

        logger.info("Starting watch for %s (refresh every %ss)", root, self._refresh_interval)
        stats = WatchStats()
        try:
            self._run(cancel, root, stats)
        finally:
            logger.info(
                "Watch for %s stopped after %s cycles, %s events",
                root,
                stats.cycles,
                stats.events_emitted,
            )

    def start(self, cancel: CancelSignal, path: Union[str, Path]) -> "WatchHandle":
        """Run ``watch_dir`` on a background thread."""

        handle = WatchHandle(lambda: self.watch_dir(cancel, path), name=f"dirwatch:{os.fspath(path)}")
        handle.start()
        return handle

    def close(self) -> None:
        """Close the event sink. Call only after ``watch_dir`` has returned."""

        self.events.close()

    def _run(self, cancel: CancelSignal, root: str, stats: WatchStats) -> None:
        try:
            previous = take_snapshot(root, cancel, self._enumerator)
        except WatchCancelled:
            logger.info("Watch for %s cancelled during initial scan", root)
            return
        logger.debug("Initial snapshot of %s holds %s files", root, len(previous))

        ticker = Ticker(self._refresh_interval)
        while True:
            if not _root_exists(root):
                logger.info("Watched directory %s no longer exists", root)
                return

            if not ticker.wait(cancel):
                logger.info("Watch for %s cancelled: %s", root, cancel.err())
                return

            try:
                current = take_snapshot(root, cancel, self._enumerator)
            except WatchCancelled:
                logger.info("Watch for %s cancelled mid-scan: %s", root, cancel.err())
                return
            except EnumerationError:
                if not _root_exists(root):
                    logger.info("Watched directory %s disappeared during scan", root)
                    return
                raise

            events = diff_snapshots(previous, current)
            for event in events:
                self.events.emit(event)

            previous = current
            stats.cycles += 1
            stats.events_emitted += len(events)


class WatchHandle:
    """Background thread running one watch session."""

    def __init__(self, target: Callable[[], None], *, name: str):
        self._target = target
        self._error: Optional[BaseException] = None
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the session to end; True if it has."""

        self._thread.join(timeout)
        return not self._thread.is_alive()

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def result(self, timeout: Optional[float] = None) -> None:
        """Wait for the session and re-raise the error it ended with, if any."""

        if not self.join(timeout):
            raise TimeoutError(f"Watch session still running after {timeout} seconds")
        if self._error is not None:
            raise self._error

    def _run(self) -> None:
        try:
            self._target()
        except Exception as exc:
            self._error = exc


def take_snapshot(
    root: str,
    cancel: CancelSignal,
    enumerator: TreeEnumerator = walk_tree,
) -> Snapshot:
    """Collect every non-directory path under ``root`` in one complete walk."""

    results: Set[str] = set()
    for entry in enumerator(root):
        # Cancellation takes precedence over an entry error seen at the same step.
        cancel.raise_if_cancelled()
        if entry.error is not None:
            raise EnumerationError(entry.path, entry.error) from entry.error
        if entry.is_dir:
            continue
        results.add(entry.path)
    return frozenset(results)


def diff_snapshots(previous: Iterable[str], current: Iterable[str]) -> List[FileEvent]:
    """Return created events followed by removed events, each sorted by path."""

    old = set(previous)
    new = set(current)
    events = [FileEvent(event_type=EventType.CREATED, path=path) for path in sorted(new - old)]
    events.extend(FileEvent(event_type=EventType.REMOVED, path=path) for path in sorted(old - new))
    return events


def _root_exists(root: str) -> bool:
    try:
        os.stat(root)
    except FileNotFoundError:
        return False
    except OSError:
        # Unreadable roots still count as present; the walk reports the error.
        return True
    return True
