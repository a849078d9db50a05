# cdn_mirror/core/catalog/query.py
"""
Filter / sort / paginate over the on-disk cache.

Nothing is kept in memory between calls: every query walks both roots,
so the filesystem is the only source of truth.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from cdn_mirror.schemas.models import (
    AssetKind,
    CatalogEntry,
    CatalogPage,
    CatalogParams,
    MirrorConfig,
)

from .indexer import walk
from .metadata import extract_metadata

logger = logging.getLogger(__name__)

_SORT_KEYS: dict[str, Callable[[CatalogEntry], Any]] = {
    "mtime": lambda e: e.mtime_ms,
    "name": lambda e: e.name,
    "size": lambda e: e.size_bytes,
}


def _matches(entry: CatalogEntry, params: CatalogParams) -> bool:
    if params.kind is not None and entry.category != params.kind:
        return False
    if params.q is not None and params.q not in entry.public_url:
        return False
    if params.name is not None and params.name.lower() not in entry.name.lower():
        return False
    if params.updated_from is not None and entry.mtime_ms < params.updated_from:
        return False
    if params.updated_to is not None and entry.mtime_ms > params.updated_to:
        return False
    return True


def sort_entries(entries: list[CatalogEntry], sort_by: str, order: str) -> list[CatalogEntry]:
    """
    Stable ascending sort; descending is its exact reverse, so equal keys
    come back in reverse walk order rather than walk order.
    """
    ordered = sorted(entries, key=_SORT_KEYS.get(sort_by, _SORT_KEYS["mtime"]))
    if order == "desc":
        ordered.reverse()
    return ordered


class CatalogQuery:
    def __init__(self, config: MirrorConfig) -> None:
        self.config = config

    def build_catalog(self) -> list[CatalogEntry]:
        entries: list[CatalogEntry] = []
        kinds: tuple[AssetKind, ...] = ("css", "js")
        for kind in kinds:
            for rec in walk(self.config.root_for(kind)):
                meta = extract_metadata(rec.relative_path)
                entries.append(
                    CatalogEntry(
                        kind=kind,
                        relative_path=rec.relative_path,
                        public_url=f"/{kind}/{rec.relative_path}",
                        size_bytes=rec.size_bytes,
                        mtime_ms=rec.mtime_ms,
                        name=meta.name,
                        version=meta.version,
                        extension=meta.extension,
                        # unknown extensions fall back to the root they live under
                        category=meta.category if meta.category != "other" else kind,
                    )
                )
        return entries

    def query(self, params: CatalogParams | None = None) -> CatalogPage:
        p = params or CatalogParams()
        filtered = [e for e in self.build_catalog() if _matches(e, p)]
        ordered = sort_entries(filtered, p.sort_by, p.order)

        total = len(ordered)
        start = (p.page - 1) * p.page_size
        items = ordered[start : start + p.page_size]
        logger.debug(
            "catalog.query total=%d page=%d page_size=%d returned=%d",
            total,
            p.page,
            p.page_size,
            len(items),
        )
        return CatalogPage(
            items=items,
            total=total,
            page=p.page,
            page_size=p.page_size,
            has_more=start + p.page_size < total,
        )


def build_catalog_response(page: CatalogPage) -> dict[str, Any]:
    """JSON-ready shape: {count, total, page, pageSize, hasMore, items}."""
    return {
        "count": len(page.items),
        "total": page.total,
        "page": page.page,
        "pageSize": page.page_size,
        "hasMore": page.has_more,
        "items": [e.to_item() for e in page.items],
    }


__all__ = ["CatalogQuery", "sort_entries", "build_catalog_response"]
