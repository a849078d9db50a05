# cdn_mirror/core/fetch/paths.py
"""
Deterministic, URL-path-preserving on-disk layout for mirrored assets.

Layout (under cache_root/):
  - css/<sanitized url dir>/<filename>   stylesheets, fonts, images
  - js/<sanitized url dir>/<filename>    scripts and anything unrecognised

The sanitized directory of a URL is also its public path under /css or /js,
so changing these rules breaks every previously issued URL.
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from urllib.parse import urlparse

from cdn_mirror.schemas.models import AssetKind, MirrorConfig, ResolvedPath

from .errors import ResolutionError

PLACEHOLDER_FILENAME = "index"

STYLE_EXTS = {".css"}
SCRIPT_EXTS = {".js", ".mjs"}
# Fonts/images live next to the stylesheets that reference them.
AUX_STYLE_EXTS = {".woff", ".woff2", ".ttf", ".otf", ".eot", ".svg", ".png", ".jpg", ".jpeg", ".gif", ".webp"}

_ALLOWED_SCHEMES = {"http", "https"}


def _parse(url: str):
    try:
        u = urlparse(url.strip())
    except ValueError as e:
        raise ResolutionError(f"Malformed URL {url!r}: {e}") from e
    if u.scheme.lower() not in _ALLOWED_SCHEMES or not u.hostname:
        raise ResolutionError(f"Not an absolute http(s) URL: {url!r}")
    return u


def _split_url_path(url_path: str) -> tuple[str, str]:
    """Return (directory, basename) of a URL path, ignoring trailing slashes."""
    trimmed = url_path.rstrip("/")
    return posixpath.dirname(trimmed), posixpath.basename(trimmed)


def safe_segments(raw: str) -> list[str]:
    """
    Split a path into segments that are safe to join under a root:
    leading slashes stripped, backslashes treated as separators,
    empty / '.' / '..' segments dropped.
    """
    norm = raw.replace("\\", "/").lstrip("/")
    return [p for p in norm.split("/") if p and p not in (".", "..")]


def sanitize_subdir(url: str) -> str:
    """
    Sub-directory (forward slashes, no leading slash) a URL is stored under.

    Falls back to the hostname when the URL path has no directory part, so
    e.g. https://a.example/x.js and https://b.example/x.js never collide.
    """
    u = _parse(url)
    directory, _ = _split_url_path(u.path)
    parts = safe_segments(directory)
    if not parts:
        parts = [u.hostname or ""]
    return "/".join(p for p in parts if p)


def kind_for(filename: str, content_type: str | None = None) -> AssetKind:
    """Category by extension first, then MIME type, defaulting to script."""
    ext = posixpath.splitext(filename)[1].lower()
    if ext in STYLE_EXTS or ext in AUX_STYLE_EXTS:
        return "css"
    if ext in SCRIPT_EXTS:
        return "js"
    if content_type:
        ct = content_type.split(";", 1)[0].strip().lower()
        if ct == "text/css" or ct.startswith("font/") or ct.startswith("image/"):
            return "css"
        return "js"
    return "js"


def has_known_extension(filename: str) -> bool:
    ext = posixpath.splitext(filename)[1].lower()
    return ext in STYLE_EXTS or ext in SCRIPT_EXTS or ext in AUX_STYLE_EXTS


def guarded_join(root: Path, parts: list[str], filename: str) -> Path:
    """Join parts under root; collapse to root/filename if the result escapes root."""
    candidate = root.joinpath(*parts, filename)
    root_resolved = root.resolve()
    if not candidate.resolve().is_relative_to(root_resolved):
        return root / filename
    return candidate


class PathResolver:
    """Maps remote URLs to storage paths and public paths. Performs no I/O."""

    def __init__(self, config: MirrorConfig) -> None:
        self.config = config

    def resolve(self, remote_url: str, content_type: str | None = None) -> ResolvedPath:
        u = _parse(remote_url)
        _, base = _split_url_path(u.path)
        filename = base or PLACEHOLDER_FILENAME

        kind = kind_for(filename, content_type)
        if not posixpath.splitext(filename)[1]:
            # Keeps the path stable whether or not a content-type is known.
            filename = f"{filename}.{kind}"

        root = self.config.root_for(kind)
        sub = sanitize_subdir(remote_url)
        parts = sub.split("/") if sub else []
        storage_path = guarded_join(root, parts, filename)

        return ResolvedPath(storage_path=storage_path, storage_dir=storage_path.parent, filename=filename, kind=kind)

    def candidates(self, remote_url: str) -> list[ResolvedPath]:
        """
        Every path a previously stored copy of `remote_url` could occupy.

        URLs without a recognised extension may have been stored as a stylesheet
        (text/css response) or as a script, so both spellings are checked.
        """
        first = self.resolve(remote_url)
        _, base = _split_url_path(_parse(remote_url).path)
        if has_known_extension(base or PLACEHOLDER_FILENAME):
            return [first]
        styled = self.resolve(remote_url, "text/css")
        if styled.storage_path == first.storage_path:
            return [first]
        return [first, styled]

    def public_path(self, remote_url: str, kind: AssetKind, filename: str) -> str:
        sub = sanitize_subdir(remote_url)
        return f"/{kind}/{sub}/{filename}" if sub else f"/{kind}/{filename}"

    def access_url(self, public_path: str, base_url: str | None = None) -> str:
        base = base_url if base_url is not None else self.config.public_base_url
        if not base:
            return public_path
        return f"{base.rstrip('/')}{public_path}"


__all__ = [
    "PLACEHOLDER_FILENAME",
    "STYLE_EXTS",
    "SCRIPT_EXTS",
    "AUX_STYLE_EXTS",
    "safe_segments",
    "sanitize_subdir",
    "kind_for",
    "has_known_extension",
    "guarded_join",
    "PathResolver",
]
