# cdn_mirror/schemas/models.py

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Category of a cached asset; also the name of its public prefix (/css, /js).
AssetKind = Literal["css", "js"]

SortKey = Literal["mtime", "name", "size"]
SortOrder = Literal["asc", "desc"]

PAGE_SIZE_MIN = 20
PAGE_SIZE_MAX = 50
PAGE_SIZE_DEFAULT = 30

# =========================
# Configuration
# =========================


class MirrorConfig(BaseModel):
    """
    Immutable process configuration shared by every component.

    Built once (CLI, tests) and passed explicitly to each constructor so that
    nothing depends on module-level root directories.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="ignore")

    cache_root: Path = Field(default=Path("cache"), description="Parent directory of both category roots.")
    css_dirname: str = Field("css", min_length=1, description="Style root directory name under cache_root.")
    js_dirname: str = Field("js", min_length=1, description="Script root directory name under cache_root.")
    timeout_s: float = Field(20.0, gt=0, description="Per-request HTTP timeout in seconds.")
    user_agent: str = Field("AssetCache/1.0", description="User-Agent string used in HTTP requests.")
    accept: str = Field(
        "text/css, application/javascript, */*",
        description="Accept header for top-level asset fetches.",
    )
    seed_file: Path = Field(default=Path("seed.txt"), description="Newline-delimited URL list used by the seed command.")
    public_base_url: str | None = Field(
        None,
        description="Optional scheme://host prefix used to build absolute access URLs.",
    )

    @field_validator("public_base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip().rstrip("/")
        return v or None

    @property
    def css_root(self) -> Path:
        return self.cache_root / self.css_dirname

    @property
    def js_root(self) -> Path:
        return self.cache_root / self.js_dirname

    def root_for(self, kind: AssetKind) -> Path:
        return self.css_root if kind == "css" else self.js_root

    def ensure_roots(self) -> None:
        """Create the cache root and both category roots if missing."""
        for d in (self.cache_root, self.css_root, self.js_root):
            d.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_env(cls, **overrides: Any) -> MirrorConfig:
        """
        Build a config from CDN_MIRROR_* environment variables.
        Explicit keyword overrides (when not None) win over the environment.
        """
        env_map = {
            "cache_root": "CDN_MIRROR_CACHE_ROOT",
            "timeout_s": "CDN_MIRROR_TIMEOUT",
            "user_agent": "CDN_MIRROR_USER_AGENT",
            "seed_file": "CDN_MIRROR_SEED_FILE",
            "public_base_url": "CDN_MIRROR_PUBLIC_BASE_URL",
        }
        data: dict[str, Any] = {}
        for field, var in env_map.items():
            val = os.getenv(var)
            if val:
                data[field] = val
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)


# =========================
# Fetch / store contracts
# =========================


class ResolvedPath(BaseModel):
    """Where a remote URL lives on disk. Produced by PathResolver; no I/O involved."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    storage_path: Path
    storage_dir: Path
    filename: str
    kind: AssetKind


class AssetRecord(BaseModel):
    """
    A stored asset, either freshly written or found already on disk.

    Stored files are never overwritten, so a record only ever describes the
    first successful write for its URL.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="ignore")

    remote_url: str = Field(..., description="Source URL the bytes were fetched from.")
    kind: AssetKind = Field(..., description="Category root the file lives under.")
    storage_path: Path = Field(..., description="Absolute or config-relative path of the stored file.")
    public_path: str = Field(..., description="Public path under /css or /js.")
    filename: str = Field(..., description="Final path segment of the stored file.")
    size_bytes: int = Field(..., ge=0)
    fetched_at: datetime = Field(..., description="Modification time of the stored file (UTC).")
    skipped: bool = Field(False, description="True when the network fetch was skipped (cache hit).")


class CssReference(BaseModel):
    """One url(...) reference inside a stylesheet, resolved for fetching. Never persisted."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    raw_href: str
    resolved_url: str
    local_path: Path


class CrawlReport(BaseModel):
    """Counters for one stylesheet crawl. Failures are reported, never raised."""

    base_url: str
    found: int = 0
    fetched: int = 0
    skipped: int = 0
    failed: int = 0
    failed_urls: list[str] = Field(default_factory=list)


class SeedResult(BaseModel):
    """Outcome for one line of a seed list."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    remote_url: str
    saved_filename: str = ""
    size_bytes: int = 0
    kind: AssetKind = "js"
    skipped: bool = False
    error: str | None = None
    public_path: str = ""


# =========================
# Catalog (read model)
# =========================


class FileRecord(BaseModel):
    """Raw file found by the catalog indexer."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    absolute_path: Path
    relative_path: str = Field(..., description="Root-relative path using forward slashes.")
    size_bytes: int = Field(..., ge=0)
    mtime_ms: int = Field(..., description="Modification time in epoch milliseconds.")


class LibraryMetadata(BaseModel):
    """Library identity parsed from a cache-relative path."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    version: str = ""
    extension: str = ""
    category: str = ""


class CatalogEntry(BaseModel):
    """Projection of one stored file, rebuilt on every query."""

    model_config = ConfigDict(frozen=True)

    kind: AssetKind
    relative_path: str
    public_url: str
    size_bytes: int
    mtime_ms: int
    name: str = ""
    version: str = ""
    extension: str = ""
    category: str = ""

    def to_item(self) -> dict[str, Any]:
        """Wire shape for a catalog response item."""
        return {
            "type": self.kind,
            "path": self.relative_path,
            "url": self.public_url,
            "size": self.size_bytes,
            "mtime": self.mtime_ms,
            "name": self.name,
            "version": self.version,
            "ext": self.extension,
            "category": self.category,
        }


def _int_or_none(v: Any) -> int | None:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    try:
        return int(float(str(v).strip()))
    except (TypeError, ValueError, OverflowError):
        return None


class CatalogParams(BaseModel):
    """
    Filter/sort/paginate parameters for a catalog query.

    Field aliases match the query-string names (type, q, name, updatedFrom,
    updatedTo, sortBy, order, page, pageSize). page and page_size are clamped
    rather than rejected.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    kind: AssetKind | None = Field(None, alias="type")
    q: str | None = Field(None, description="Substring match on the public path.")
    name: str | None = Field(None, description="Case-insensitive substring match on library name.")
    updated_from: int | None = Field(None, alias="updatedFrom", description="Inclusive lower mtime bound (epoch ms).")
    updated_to: int | None = Field(None, alias="updatedTo", description="Inclusive upper mtime bound (epoch ms).")
    sort_by: SortKey = Field("mtime", alias="sortBy")
    order: SortOrder = Field("desc")
    page: int = Field(1)
    page_size: int = Field(PAGE_SIZE_DEFAULT, alias="pageSize")

    @field_validator("page", mode="before")
    @classmethod
    def _clamp_page(cls, v: Any) -> int:
        n = _int_or_none(v)
        return max(1, n if n is not None else 1)

    @field_validator("page_size", mode="before")
    @classmethod
    def _clamp_page_size(cls, v: Any) -> int:
        n = _int_or_none(v)
        if n is None:
            n = PAGE_SIZE_DEFAULT
        return min(PAGE_SIZE_MAX, max(PAGE_SIZE_MIN, n))

    @field_validator("updated_from", "updated_to", mode="before")
    @classmethod
    def _coerce_ms(cls, v: Any) -> int | None:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return _int_or_none(v)

    @field_validator("q", "name", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> str | None:
        if v is None:
            return None
        s = str(v)
        return s if s.strip() else None

    @classmethod
    def from_query(cls, query: dict[str, Any]) -> CatalogParams:
        """
        Build params from a raw query mapping, dropping values that would not
        validate (unknown type/sortBy/order) so that defaults apply instead.
        """
        data: dict[str, Any] = {}
        for key, val in query.items():
            if val is None:
                continue
            if key == "type":
                if str(val).lower() in ("css", "js"):
                    data["type"] = str(val).lower()
                continue
            if key == "sortBy":
                if val in ("mtime", "name", "size"):
                    data["sortBy"] = val
                continue
            if key == "order":
                if str(val).lower() in ("asc", "desc"):
                    data["order"] = str(val).lower()
                continue
            data[key] = val
        return cls.model_validate(data)


class CatalogPage(BaseModel):
    """One page of catalog entries plus the unpaginated total."""

    items: list[CatalogEntry] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = PAGE_SIZE_DEFAULT
    has_more: bool = False


__all__ = [
    "AssetKind",
    "SortKey",
    "SortOrder",
    "PAGE_SIZE_MIN",
    "PAGE_SIZE_MAX",
    "PAGE_SIZE_DEFAULT",
    "MirrorConfig",
    "ResolvedPath",
    "AssetRecord",
    "CssReference",
    "CrawlReport",
    "SeedResult",
    "FileRecord",
    "LibraryMetadata",
    "CatalogEntry",
    "CatalogParams",
    "CatalogPage",
]
