"""
Shared fixtures for the dirwatch tests.
"""

import os
import threading
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

import pytest

from dirwatch.cancel import CancelSignal
from dirwatch.enumerator import TreeEntry, TreeEnumerator, walk_tree


class CountingEnumerator:
    """Wraps an enumerator and counts completed walks so tests can wait on cycles."""

    def __init__(self, inner: TreeEnumerator = walk_tree) -> None:
        self._inner = inner
        self._cond = threading.Condition()
        self.scans = 0

    def __call__(self, root: str) -> Iterator[TreeEntry]:
        yield from self._inner(root)
        with self._cond:
            self.scans += 1
            self._cond.notify_all()

    def wait_for_scans(self, count: int, timeout: float = 5.0) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self.scans >= count, timeout)


class ScriptedEnumerator:
    """Serves a fixed sequence of snapshots, repeating the last one."""

    def __init__(self, snapshots: Sequence[Sequence[str]], errors: Optional[dict] = None) -> None:
        self._snapshots: List[Sequence[str]] = list(snapshots)
        self._errors = errors or {}
        self.calls = 0

    def __call__(self, root: str) -> Iterator[TreeEntry]:
        index = self.calls
        self.calls += 1
        yield TreeEntry(path=root, is_dir=True)
        if index in self._errors:
            yield TreeEntry(path=os.path.join(root, "locked"), is_dir=True, error=self._errors[index])
            return
        paths = self._snapshots[min(index, len(self._snapshots) - 1)]
        for name in paths:
            yield TreeEntry(path=os.path.join(root, name), is_dir=False)


@pytest.fixture
def watch_root(tmp_path: Path) -> Path:
    """Create a small directory tree to watch."""
    root = tmp_path / "watched"
    root.mkdir()
    (root / "a.txt").write_text("a")
    sub = root / "sub"
    sub.mkdir()
    (sub / "b.txt").write_text("b")
    (root / "empty").mkdir()
    return root


@pytest.fixture
def cancel() -> Iterator[CancelSignal]:
    """A cancel signal that is always fired at teardown."""
    signal = CancelSignal()
    yield signal
    signal.cancel("test teardown")
