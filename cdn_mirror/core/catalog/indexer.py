# cdn_mirror/core/catalog/indexer.py
from __future__ import annotations

import os
from pathlib import Path

from cdn_mirror.core.fetch.storage import TEMP_PREFIX, TEMP_SUFFIX
from cdn_mirror.schemas.models import FileRecord


def _is_temp(name: str) -> bool:
    return name.startswith(TEMP_PREFIX) and name.endswith(TEMP_SUFFIX)


def walk(root: Path) -> list[FileRecord]:
    """
    Depth-first listing of regular files under `root`.

    Uses an explicit stack (no recursion depth limit) and visits directory
    entries in lexicographic order, so the output order is stable for an
    unchanged tree. Symlinks are not followed; a missing root yields [].
    In-flight download temp files (.dl_*.part) are skipped.
    """
    if not root.is_dir():
        return []

    out: list[FileRecord] = []
    stack: list[Path] = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError:
            continue

        subdirs: list[Path] = []
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                subdirs.append(Path(entry.path))
                continue
            if not entry.is_file(follow_symlinks=False) or _is_temp(entry.name):
                continue
            try:
                st = entry.stat(follow_symlinks=False)
            except OSError:
                continue
            abs_path = Path(entry.path)
            out.append(
                FileRecord(
                    absolute_path=abs_path,
                    relative_path=abs_path.relative_to(root).as_posix(),
                    size_bytes=st.st_size,
                    mtime_ms=st.st_mtime_ns // 1_000_000,
                )
            )
        # reversed so the lexicographically first sub-directory is popped next
        stack.extend(reversed(subdirs))
    return out


__all__ = ["walk"]
