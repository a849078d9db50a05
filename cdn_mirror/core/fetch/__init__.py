# cdn_mirror/core/fetch/__init__.py
# FetchStore is imported from .store directly; it depends on core.css, which imports this package.
from .errors import (
    MIRROR_ERRORS,
    DependencyFetchError,
    FetchError,
    MirrorError,
    ResolutionError,
    StorageError,
    classify_fetch_error,
    fetch_error_guard,
)
from .http import HttpPayload, http_get, new_session
from .paths import PathResolver, kind_for, safe_segments, sanitize_subdir
from .storage import PathLocks, atomic_write_bytes

__all__ = [
    "MirrorError",
    "ResolutionError",
    "FetchError",
    "StorageError",
    "DependencyFetchError",
    "MIRROR_ERRORS",
    "classify_fetch_error",
    "fetch_error_guard",
    "HttpPayload",
    "http_get",
    "new_session",
    "PathResolver",
    "kind_for",
    "safe_segments",
    "sanitize_subdir",
    "PathLocks",
    "atomic_write_bytes",
]
