# cdn_mirror/core/fetch/store.py
"""
Cache-first storage of a single remote asset.

store(url):
  - existing file at any path the URL may resolve to → cache hit, no fetch
  - otherwise GET (bounded timeout, identifying UA), re-resolve with the
    response Content-Type, write the body atomically
  - stylesheets (hit or miss) are handed to the CSS dependency crawler
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import requests

from cdn_mirror.core.css.crawler import CssDependencyCrawler
from cdn_mirror.schemas.models import AssetKind, AssetRecord, MirrorConfig

from .errors import StorageError, fetch_error_guard
from .http import http_get, new_session
from .paths import PathResolver
from .storage import PathLocks, atomic_write_bytes

logger = logging.getLogger(__name__)


class FetchStore:
    def __init__(
        self,
        config: MirrorConfig,
        resolver: PathResolver | None = None,
        crawler: CssDependencyCrawler | None = None,
        *,
        session: requests.Session | None = None,
        locks: PathLocks | None = None,
        crawl_css: bool = True,
    ) -> None:
        self.config = config
        self.resolver = resolver or PathResolver(config)
        self.session = session or new_session(config.user_agent)
        self.locks = locks if locks is not None else PathLocks()
        self.crawler: CssDependencyCrawler | None = None
        if crawl_css:
            self.crawler = crawler or CssDependencyCrawler(
                config, self.resolver, session=self.session, locks=self.locks
            )

    def _record(self, url: str, kind: AssetKind, path: Path, filename: str, *, skipped: bool) -> AssetRecord:
        try:
            st = path.stat()
        except OSError as e:
            raise StorageError(f"Failed to stat {path}: {e}", path=path) from e
        return AssetRecord(
            remote_url=url,
            kind=kind,
            storage_path=path,
            public_path=self.resolver.public_path(url, kind, filename),
            filename=filename,
            size_bytes=st.st_size,
            fetched_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            skipped=skipped,
        )

    def _crawl(self, url: str, path: Path) -> None:
        if self.crawler is None:
            return
        try:
            css = path.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}", path=path) from e
        with fetch_error_guard(url=url):
            self.crawler.crawl(url, css)

    def find_existing(self, url: str) -> AssetRecord | None:
        for resolved in self.resolver.candidates(url):
            if resolved.storage_path.is_file():
                return self._record(url, resolved.kind, resolved.storage_path, resolved.filename, skipped=True)
        return None

    def store(self, url: str) -> AssetRecord:
        """
        Ensure `url` is cached and return its record.

        Raises ResolutionError (bad URL), FetchError (network/timeout/non-2xx)
        or StorageError (disk). CSS dependency failures never propagate.
        """
        url = url.strip()
        pre = self.resolver.resolve(url)

        with self.locks.hold(pre.storage_path):
            record = self.find_existing(url)
            if record is not None:
                logger.info("fetch.cache_hit url=%s path=%s", url, record.storage_path)
            else:
                record = self._fetch_and_write(url)

        # Outside the lock: a stylesheet may reference its own path.
        if record.kind == "css":
            self._crawl(url, record.storage_path)
        return record

    def _fetch_and_write(self, url: str) -> AssetRecord:
        with fetch_error_guard(url=url):
            payload = http_get(
                self.session,
                url,
                user_agent=self.config.user_agent,
                timeout=self.config.timeout_s,
                accept=self.config.accept,
            )
            # Pre-resolution only tested existence; the response type decides the root.
            final = self.resolver.resolve(url, payload.content_type)
            atomic_write_bytes(final.storage_path, payload.body)

        logger.info(
            "fetch.saved url=%s kind=%s path=%s bytes=%d",
            url,
            final.kind,
            final.storage_path,
            len(payload.body),
        )
        return self._record(url, final.kind, final.storage_path, final.filename, skipped=False)


__all__ = ["FetchStore"]
