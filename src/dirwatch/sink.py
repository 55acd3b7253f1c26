"""Event sinks the watcher writes to."""
from __future__ import annotations

import logging
import queue
import threading
from typing import Iterator, List, Optional, Protocol

from .errors import ChannelClosedError
from .events import FileEvent

logger = logging.getLogger(__name__)

_EMPTY = object()


class EventSink(Protocol):
    """Consumer-facing capability the watcher emits events through."""

    def emit(self, event: FileEvent) -> None:
        ...

    def close(self) -> None:
        ...


class EventChannel:
    """Unbuffered hand-off: ``emit`` blocks until a consumer receives the event."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._slot: object = _EMPTY
        self._closed = False
        self._sent = 0
        self._received = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def emit(self, event: FileEvent) -> None:
        with self._cond:
            while self._slot is not _EMPTY and not self._closed:
                self._cond.wait()
            if self._closed:
                raise ChannelClosedError("Cannot send on a closed event channel")

            self._slot = event
            self._sent += 1
            ticket = self._sent
            self._cond.notify_all()

            while self._received < ticket and not self._closed:
                self._cond.wait()
            if self._received < ticket:
                self._slot = _EMPTY
                raise ChannelClosedError("Event channel closed before the event was received")

    def receive(self, timeout: Optional[float] = None) -> FileEvent:
        """Take the next event.

        Raises ``TimeoutError`` when nothing arrives within ``timeout`` and
        ``ChannelClosedError`` once the channel is closed.
        """

        with self._cond:
            self._cond.wait_for(
                lambda: self._slot is not _EMPTY or self._closed,
                timeout,
            )
            if self._slot is not _EMPTY:
                event = self._slot
                self._slot = _EMPTY
                self._received += 1
                self._cond.notify_all()
                return event  # type: ignore[return-value]
            if self._closed:
                raise ChannelClosedError("Event channel is closed")
            raise TimeoutError(f"No event received within {timeout} seconds")

    def close(self) -> None:
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._cond.notify_all()
        logger.debug("Event channel closed")

    def __iter__(self) -> Iterator[FileEvent]:
        while True:
            try:
                yield self.receive()
            except ChannelClosedError:
                return


class QueueSink:
    """Buffered sink backed by ``queue.Queue``; ``emit`` never waits on a consumer."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def emit(self, event: FileEvent) -> None:
        with self._lock:
            if self._closed:
                raise ChannelClosedError("Cannot send on a closed queue sink")
            self._queue.put(event)

    def receive(self, timeout: Optional[float] = None) -> FileEvent:
        """Take the next buffered event.

        Raises ``TimeoutError`` when nothing arrives within ``timeout`` and
        ``ChannelClosedError`` once every event before ``close`` is consumed.
        """

        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty as exc:
            raise TimeoutError(f"No event received within {timeout} seconds") from exc
        if item is _EMPTY:
            # Put the close marker back for the next reader.
            self._queue.put(item)
            raise ChannelClosedError("Queue sink is closed")
        return item  # type: ignore[return-value]

    def drain(self) -> List[FileEvent]:
        """Return every event currently buffered without waiting."""

        events: List[FileEvent] = []
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return events
            if item is _EMPTY:
                self._queue.put(item)
                return events
            events.append(item)  # type: ignore[arg-type]

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put_nowait(_EMPTY)
