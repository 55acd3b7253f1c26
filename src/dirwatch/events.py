"""Event models emitted by the directory watcher."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EventType(str, Enum):
    """Types of filesystem changes emitted by the watcher."""

    CREATED = "file_created"
    REMOVED = "file_removed"


@dataclass(frozen=True)
class FileEvent:
    """A single presence change observed in the watched directory tree."""

    event_type: EventType
    path: str
