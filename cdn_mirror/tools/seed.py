# cdn_mirror/tools/seed.py
"""
Seed list → cached assets.

Pipeline (sequential, input order):
  1) parse_seed_text: trim lines, drop blanks and '#' comments
  2) FetchStore.store(url) per line (transitively crawls stylesheet dependencies)
  3) one SeedResult per URL; a failure becomes an error result, never an exception

This tool is the single integration point for the CLI.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from cdn_mirror.core.fetch.errors import MirrorError
from cdn_mirror.core.fetch.paths import PathResolver
from cdn_mirror.core.fetch.store import FetchStore
from cdn_mirror.schemas.models import SeedResult

logger = logging.getLogger(__name__)


def parse_seed_text(text: str) -> list[str]:
    out: list[str] = []
    for line in text.splitlines():
        s = line.strip()
        if not s or s.startswith("#"):
            continue
        out.append(s)
    return out


class SeedRunner:
    def __init__(self, store: FetchStore) -> None:
        self.store = store

    def run(self, seed_text: str) -> list[SeedResult]:
        return self.run_urls(parse_seed_text(seed_text))

    def run_urls(self, urls: Iterable[str]) -> list[SeedResult]:
        results: list[SeedResult] = []
        for url in urls:
            try:
                rec = self.store.store(url)
            except MirrorError as e:
                logger.warning("seed.url_failed url=%s error=%s", url, e)
                # kind defaults to "js" even for .css URLs (see DESIGN.md)
                results.append(SeedResult(remote_url=url, error=str(e)))
                continue
            results.append(
                SeedResult(
                    remote_url=url,
                    saved_filename=rec.filename,
                    size_bytes=rec.size_bytes,
                    kind=rec.kind,
                    skipped=rec.skipped,
                    public_path=rec.public_path,
                )
            )
        failed = sum(1 for r in results if r.error)
        logger.info("seed.done count=%d failed=%d", len(results), failed)
        return results

    def run_seed_file(self, path: Path) -> list[SeedResult]:
        """Run a seed file; a missing file is an empty run."""
        if not path.exists():
            logger.info("seed.file_missing path=%s", path)
            return []
        return self.run(path.read_text(encoding="utf-8"))


def build_seed_response(
    results: list[SeedResult],
    *,
    resolver: PathResolver | None = None,
    base_url: str | None = None,
) -> dict[str, Any]:
    """JSON-ready shape: {count, results: [{url, saved, accessUrl, size, type, skipped, error?, filename}]}."""
    items: list[dict[str, Any]] = []
    for r in results:
        saved = r.public_path if r.saved_filename else ""
        if saved and resolver is not None:
            access = resolver.access_url(saved, base_url)
        elif saved and base_url:
            access = f"{base_url.rstrip('/')}{saved}"
        else:
            access = saved
        item: dict[str, Any] = {
            "url": r.remote_url,
            "saved": saved,
            "accessUrl": access,
            "size": r.size_bytes,
            "type": r.kind,
            "skipped": r.skipped,
            "filename": r.saved_filename,
        }
        if r.error is not None:
            item["error"] = r.error
        items.append(item)
    return {"count": len(items), "results": items}


__all__ = ["parse_seed_text", "SeedRunner", "build_seed_response"]
