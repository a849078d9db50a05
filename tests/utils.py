# tests/utils.py
from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

import requests

from cdn_mirror.schemas.models import MirrorConfig

# ---------------------------
# Fake HTTP layer
# ---------------------------


class FakeResp:
    def __init__(self, *, status: int = 200, headers: Mapping[str, str] | None = None, body: bytes = b""):
        self.status_code = status
        self.headers = dict(headers or {})
        self.content = body

    def close(self) -> None:  # requests API compat
        pass


class FakeSession:
    """
    Stand-in for requests.Session: maps URL -> FakeResp (or an exception to raise).
    Unknown URLs answer 404. Every call is recorded in `calls`.
    """

    def __init__(self, routes: Mapping[str, object] | None = None):
        self.routes: dict[str, object] = dict(routes or {})
        self.calls: list[str] = []
        self.last_headers: dict[str, str] | None = None
        self.last_timeout: float | None = None

    def get(self, url: str, *, headers: dict[str, str], timeout: float, allow_redirects: bool = True):
        self.calls.append(url)
        self.last_headers = dict(headers)
        self.last_timeout = timeout
        route = self.routes.get(url)
        if route is None:
            return FakeResp(status=404, body=b"not found")
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route()
        return route


def css_resp(text: str) -> FakeResp:
    return FakeResp(headers={"Content-Type": "text/css; charset=utf-8"}, body=text.encode("utf-8"))


def js_resp(text: str = "console.log(1);") -> FakeResp:
    return FakeResp(headers={"Content-Type": "application/javascript"}, body=text.encode("utf-8"))


def font_resp(body: bytes = b"wOF2\x00\x01fontdata") -> FakeResp:
    return FakeResp(headers={"Content-Type": "font/woff2"}, body=body)


def timeout_error(url: str = "") -> requests.Timeout:
    return requests.Timeout(f"timed out: {url}")


# ---------------------------
# Filesystem builders
# ---------------------------


def make_config(base: Path, **overrides) -> MirrorConfig:
    cfg = MirrorConfig(cache_root=base / "cache", **overrides)
    cfg.ensure_roots()
    return cfg


def write_cached(root: Path, rel: str, data: bytes = b"x", *, mtime_ms: int | None = None) -> Path:
    """Create a cached file under `root` and optionally pin its mtime (epoch ms)."""
    path = root.joinpath(*rel.split("/"))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    if mtime_ms is not None:
        ns = mtime_ms * 1_000_000
        os.utime(path, ns=(ns, ns))
    return path
