# cdn_mirror/core/fetch/errors.py
"""
Typed errors + utilities for the fetch-and-cache pipeline.

Exports
-------
- MirrorError, ResolutionError, FetchError, StorageError, DependencyFetchError
- MIRROR_ERRORS
- classify_fetch_error(exc, url=None)
- fetch_error_guard(url=None)
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import requests

# =========================
# Exception types
# =========================


class MirrorError(RuntimeError):
    """Base class for mirror pipeline failures."""


class ResolutionError(MirrorError):
    """A URL could not be mapped to a storage path (malformed, no host, bad scheme)."""


class FetchError(MirrorError):
    """HTTP/transport failure: connection error, timeout or non-2xx status."""

    def __init__(self, message: str, *, url: str | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class StorageError(MirrorError):
    """Writing to the cache failed (mkdir, write, rename or stat)."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class DependencyFetchError(MirrorError):
    """Every candidate source for one CSS reference failed. Never leaves the crawler."""

    def __init__(self, message: str, *, href: str, attempts: list[str] | None = None) -> None:
        super().__init__(message)
        self.href = href
        self.attempts = list(attempts or [])


# Selector tuple for grouped exception handling
MIRROR_ERRORS = (
    ResolutionError,
    FetchError,
    StorageError,
    DependencyFetchError,
)

# =========================
# Classification helpers
# =========================


def classify_fetch_error(exc: Exception, *, url: str | None = None) -> MirrorError:
    """
    Map arbitrary exceptions raised while fetching/storing to a typed MirrorError.

    Heuristics:
      - Any MirrorError subclass → passed through
      - requests.HTTPError → FetchError carrying the response status
      - requests.* errors (timeout, connection, ...) → FetchError
      - OSError (mkdir/write/replace) → StorageError
      - ValueError from URL parsing → ResolutionError
      - Fallback → MirrorError
    """
    if isinstance(exc, MirrorError):
        return exc

    if isinstance(exc, requests.HTTPError):
        resp = exc.response
        status = resp.status_code if resp is not None else None
        return FetchError(str(exc), url=url, status=status)

    if isinstance(exc, requests.RequestException):
        return FetchError(f"{type(exc).__name__}: {exc}", url=url)

    if isinstance(exc, OSError):
        path = Path(exc.filename) if getattr(exc, "filename", None) else None
        return StorageError(f"{type(exc).__name__}: {exc}", path=path)

    if isinstance(exc, ValueError):
        return ResolutionError(f"{type(exc).__name__}: {exc}")

    return MirrorError(f"{type(exc).__name__}: {exc}")


@contextmanager
def fetch_error_guard(*, url: str | None = None) -> Iterator[None]:
    """Context manager to normalize unexpected exceptions from fetch/store internals."""
    try:
        yield
    except MIRROR_ERRORS:
        raise
    except Exception as exc:  # noqa: BLE001
        raise classify_fetch_error(exc, url=url) from exc


__all__ = [
    "MirrorError",
    "ResolutionError",
    "FetchError",
    "StorageError",
    "DependencyFetchError",
    "MIRROR_ERRORS",
    "classify_fetch_error",
    "fetch_error_guard",
]
