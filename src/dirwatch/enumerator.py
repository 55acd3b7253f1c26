"""Directory tree enumeration used by the watcher."""
from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from typing import Callable, Iterator, Optional


@dataclass(frozen=True)
class TreeEntry:
    """One filesystem entry produced by a tree walk."""

    path: str
    is_dir: bool
    error: Optional[OSError] = None


TreeEnumerator = Callable[[str], Iterator[TreeEntry]]


def walk_tree(root: str) -> Iterator[TreeEntry]:
    """Yield every entry under ``root``, the root included.

    Entries are visited depth-first in lexical order and symlinks are not
    followed. A directory that cannot be listed is yielded a second time with
    ``error`` set, after its first, error-free appearance.
    """

    try:
        root_stat = os.lstat(root)
    except OSError as exc:
        yield TreeEntry(path=root, is_dir=False, error=exc)
        return

    root_is_dir = stat.S_ISDIR(root_stat.st_mode)
    yield TreeEntry(path=root, is_dir=root_is_dir)
    if root_is_dir:
        yield from _walk_directory(root)


def _walk_directory(directory: str) -> Iterator[TreeEntry]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as exc:
        yield TreeEntry(path=directory, is_dir=True, error=exc)
        return

    for entry in entries:
        path = os.path.join(directory, entry.name)
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as exc:
            yield TreeEntry(path=path, is_dir=False, error=exc)
            continue
        yield TreeEntry(path=path, is_dir=is_dir)
        if is_dir:
            yield from _walk_directory(path)
