# cdn_mirror/core/fetch/storage.py
"""
Write-once file persistence for the cache roots.

- atomic_write_bytes: temp file in the destination directory, then rename,
  so a crash never leaves a half-written asset under its final name.
- PathLocks: per-path advisory locks; concurrent writers of the same target
  converge on a single fetch.
"""

from __future__ import annotations

import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .errors import StorageError

TEMP_PREFIX = ".dl_"
TEMP_SUFFIX = ".part"


def atomic_write_bytes(path: Path, data: bytes) -> Path:
    """Persist `data` at `path` in one rename. Never overwrites an existing file."""
    tmp_path: Path | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.exists():
            return path
        with tempfile.NamedTemporaryFile(prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX, delete=False, dir=str(path.parent)) as tf:
            tmp_path = Path(tf.name)
            tf.write(data)
        if path.exists():
            tmp_path.unlink(missing_ok=True)
        else:
            tmp_path.replace(path)
    except OSError as e:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise StorageError(f"Failed to write {path}: {e}", path=path) from e
    return path


class PathLocks:
    """
    Registry of one lock per storage path.

    Entries are reference counted and dropped once the last holder or waiter
    leaves, so the registry only holds paths that are in use.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, tuple[threading.Lock, list[int]]] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, path: Path) -> Iterator[None]:
        key = str(path.resolve())
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = (threading.Lock(), [0])
                self._locks[key] = entry
            entry[1][0] += 1
        lock, users = entry
        try:
            with lock:
                yield
        finally:
            with self._guard:
                users[0] -= 1
                if users[0] == 0:
                    del self._locks[key]


__all__ = ["TEMP_PREFIX", "TEMP_SUFFIX", "atomic_write_bytes", "PathLocks"]
