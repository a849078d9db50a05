# cdn_mirror/core/css/crawler.py
"""
Best-effort fetching of the fonts/images a stylesheet references.

Given a stored stylesheet and its source URL:
  1) extract url(...) references (data: URIs dropped, de-duplicated)
  2) map each to a path under the stylesheet's own cache directory
  3) skip references already on disk
  4) try the primary URL, then mirror candidates, first success wins

A failing reference is logged and counted; it never fails the caller.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urljoin, urlsplit

import requests

from cdn_mirror.core.fetch.errors import (
    DependencyFetchError,
    FetchError,
    MirrorError,
    StorageError,
    fetch_error_guard,
)
from cdn_mirror.core.fetch.http import http_get, new_session
from cdn_mirror.core.fetch.paths import PathResolver, guarded_join, safe_segments, sanitize_subdir
from cdn_mirror.core.fetch.storage import PathLocks, atomic_write_bytes
from cdn_mirror.schemas.models import CrawlReport, CssReference, MirrorConfig

from .mirrors import MirrorStrategy
from .references import extract_css_references

logger = logging.getLogger(__name__)


def _href_path(href: str) -> str:
    """Path part of an href with query string and fragment removed."""
    parts = urlsplit(href)
    if parts.scheme or parts.netloc:
        return parts.path
    return href.split("#", 1)[0].split("?", 1)[0]


class CssDependencyCrawler:
    def __init__(
        self,
        config: MirrorConfig,
        resolver: PathResolver | None = None,
        *,
        strategy: MirrorStrategy | None = None,
        session: requests.Session | None = None,
        locks: PathLocks | None = None,
    ) -> None:
        self.config = config
        self.resolver = resolver or PathResolver(config)
        self.strategy = strategy or MirrorStrategy()
        self.session = session or new_session(config.user_agent)
        self.locks = locks if locks is not None else PathLocks()

    # ---------------------------
    # Reference mapping
    # ---------------------------

    def stylesheet_dir(self, base_url: str) -> Path:
        sub = sanitize_subdir(base_url)
        return self.config.css_root.joinpath(*sub.split("/")) if sub else self.config.css_root

    def reference_for(self, base_url: str, href: str, css_dir: Path) -> CssReference | None:
        """Resolve one href; None when it has no usable file name."""
        parts = safe_segments(_href_path(href))
        if not parts:
            return None
        *dirs, filename = parts
        rel_dir = css_dir.relative_to(self.config.css_root)
        local = guarded_join(self.config.css_root, [*rel_dir.parts, *dirs], filename)
        return CssReference(raw_href=href, resolved_url=urljoin(base_url, href), local_path=local)

    # ---------------------------
    # Fetching
    # ---------------------------

    def _fetch_first(self, ref: CssReference) -> str:
        """Write the first candidate that succeeds; return its URL or raise DependencyFetchError."""
        attempts: list[str] = []
        for candidate in self.strategy.candidates(ref.resolved_url):
            attempts.append(candidate)
            try:
                payload = http_get(
                    self.session,
                    candidate,
                    user_agent=self.config.user_agent,
                    timeout=self.config.timeout_s,
                )
            except FetchError as e:
                logger.debug("css.candidate_failed href=%s url=%s error=%s", ref.raw_href, candidate, e)
                continue
            atomic_write_bytes(ref.local_path, payload.body)
            return candidate
        raise DependencyFetchError(
            f"All {len(attempts)} sources failed for {ref.raw_href}",
            href=ref.raw_href,
            attempts=attempts,
        )

    def crawl(self, base_url: str, css_bytes: bytes) -> CrawlReport:
        text = css_bytes.decode("utf-8", errors="replace")
        hrefs = extract_css_references(text)
        report = CrawlReport(base_url=base_url, found=len(hrefs))
        if not hrefs:
            return report

        css_dir = self.stylesheet_dir(base_url)
        try:
            css_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create {css_dir}: {e}", path=css_dir) from e

        for href in hrefs:
            ref: CssReference | None = None
            try:
                with fetch_error_guard(url=href):
                    ref = self.reference_for(base_url, href, css_dir)
                    if ref is None:
                        report.skipped += 1
                        continue
                    with self.locks.hold(ref.local_path):
                        if ref.local_path.exists():
                            report.skipped += 1
                            continue
                        source = self._fetch_first(ref)
            except MirrorError as e:
                # unparsable href, DependencyFetchError, or StorageError for this one file
                report.failed += 1
                report.failed_urls.append(ref.resolved_url if ref is not None else href)
                logger.warning("css.dependency_failed base=%s href=%s error=%s", base_url, href, e)
                continue
            report.fetched += 1
            logger.info("css.dependency_saved href=%s source=%s path=%s", href, source, ref.local_path)

        logger.info(
            "css.crawl_done url=%s found=%d fetched=%d skipped=%d failed=%d",
            base_url,
            report.found,
            report.fetched,
            report.skipped,
            report.failed,
        )
        return report


__all__ = ["CssDependencyCrawler"]
