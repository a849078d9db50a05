# cdn_mirror/core/catalog/__init__.py
from .indexer import walk
from .metadata import asset_category, extract_metadata
from .query import CatalogQuery, build_catalog_response, sort_entries

__all__ = [
    "walk",
    "asset_category",
    "extract_metadata",
    "CatalogQuery",
    "build_catalog_response",
    "sort_entries",
]
