# cdn_mirror/core/fetch/http.py
"""
Single-shot HTTP GET used by both the top-level store and the CSS crawler.
No retries: callers decide what a failure means (error result vs. next mirror).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests

from .errors import FetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpPayload:
    url: str
    status_code: int
    content_type: str | None
    body: bytes


def new_session(user_agent: str) -> requests.Session:
    s = requests.Session()
    s.headers.update({"User-Agent": user_agent})
    return s


def http_get(
    session: requests.Session,
    url: str,
    *,
    user_agent: str,
    timeout: float,
    accept: str = "*/*",
) -> HttpPayload:
    """GET `url` and return the full body; raise FetchError on transport errors or non-2xx."""
    headers = {"User-Agent": user_agent, "Accept": accept}
    logger.debug("http.get url=%s timeout=%s", url, timeout)
    try:
        resp = session.get(url, headers=headers, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        raise FetchError(f"{type(e).__name__}: {e}", url=url) from e

    status = int(resp.status_code)
    if not 200 <= status < 300:
        raise FetchError(f"HTTP {status} for {url}", url=url, status=status)

    return HttpPayload(
        url=url,
        status_code=status,
        content_type=resp.headers.get("Content-Type"),
        body=bytes(resp.content),
    )


__all__ = ["HttpPayload", "new_session", "http_get"]
