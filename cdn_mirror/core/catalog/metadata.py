# cdn_mirror/core/catalog/metadata.py
"""
Library name/version from a cache-relative path.

Conventions, tried in this order (first match wins):
  1) npm/<name>@<version>/...            (jsDelivr; npm scopes allowed: npm/@org/name@1.0.0)
  2) ajax/libs/<name>/<version>/...       (cdnjs)
  3) gh/<user>/<repo>@<version>/...       (jsDelivr GitHub)
  4) first segment with a non-leading '@' (unpkg and friends)

The order is part of the catalog's contract: reordering it renames entries.
"""

from __future__ import annotations

import posixpath

from cdn_mirror.core.fetch.paths import AUX_STYLE_EXTS, SCRIPT_EXTS, STYLE_EXTS
from cdn_mirror.schemas.models import LibraryMetadata


def _split_at(seg: str) -> tuple[str, str] | None:
    """'name@1.2.3' -> ('name', '1.2.3'); None for '@scope' or missing parts."""
    idx = seg.rfind("@")
    if idx <= 0:
        return None
    name, version = seg[:idx], seg[idx + 1 :]
    if not name or not version:
        return None
    return name, version


def _is_scope(seg: str) -> bool:
    return seg.startswith("@") and "@" not in seg[1:] and len(seg) > 1


def _match_npm(segs: list[str]) -> tuple[str, str] | None:
    for i, seg in enumerate(segs[:-1]):
        if seg != "npm":
            continue
        nxt = segs[i + 1]
        if _is_scope(nxt) and i + 2 < len(segs):
            hit = _split_at(segs[i + 2])
            if hit:
                return f"{nxt}/{hit[0]}", hit[1]
            continue
        hit = _split_at(nxt)
        if hit:
            return hit
    return None


def _match_cdnjs(segs: list[str]) -> tuple[str, str] | None:
    for i in range(len(segs) - 4):
        if segs[i] == "ajax" and segs[i + 1] == "libs":
            return segs[i + 2], segs[i + 3]
    return None


def _match_gh(segs: list[str]) -> tuple[str, str] | None:
    for i, seg in enumerate(segs[:-1]):
        if seg != "gh":
            continue
        for cand in segs[i + 1 : i + 3]:
            hit = _split_at(cand)
            if hit:
                return hit
    return None


def _match_any_at(segs: list[str]) -> tuple[str, str] | None:
    for i, seg in enumerate(segs):
        hit = _split_at(seg)
        if not hit:
            continue
        if i > 0 and _is_scope(segs[i - 1]):
            return f"{segs[i - 1]}/{hit[0]}", hit[1]
        return hit
    return None


_CONVENTIONS = (_match_npm, _match_cdnjs, _match_gh, _match_any_at)

_FONT_EXTS = {".woff", ".woff2", ".ttf", ".otf", ".eot"}


def asset_category(filename: str) -> str:
    """css | js | font | image | other, by file extension."""
    ext = posixpath.splitext(filename)[1].lower()
    if ext in STYLE_EXTS:
        return "css"
    if ext in SCRIPT_EXTS:
        return "js"
    if ext in _FONT_EXTS:
        return "font"
    if ext in AUX_STYLE_EXTS:
        return "image"
    return "other"


def extract_metadata(relative_path: str) -> LibraryMetadata:
    segs = [s for s in relative_path.replace("\\", "/").split("/") if s]
    filename = segs[-1] if segs else ""
    extension = posixpath.splitext(filename)[1].lstrip(".").lower()

    category = asset_category(filename)
    for matcher in _CONVENTIONS:
        hit = matcher(segs)
        if hit:
            return LibraryMetadata(name=hit[0], version=hit[1], extension=extension, category=category)

    return LibraryMetadata(name="", version="", extension=extension, category=category)


__all__ = ["asset_category", "extract_metadata"]
