# tests/conftest.py
from __future__ import annotations

from pathlib import Path

import pytest

from cdn_mirror.core.css.crawler import CssDependencyCrawler
from cdn_mirror.core.fetch.paths import PathResolver
from cdn_mirror.core.fetch.store import FetchStore
from tests.utils import FakeSession, make_config, write_cached


# -------- Config & roots --------
@pytest.fixture
def config(tmp_path: Path):
    """MirrorConfig rooted in the test's tmp path, both category roots created."""
    return make_config(tmp_path)


@pytest.fixture
def resolver(config):
    return PathResolver(config)


# -------- Fake network --------
@pytest.fixture
def session():
    """Empty FakeSession; tests register routes via `session.routes[url] = ...`."""
    return FakeSession()


@pytest.fixture
def crawler(config, resolver, session):
    return CssDependencyCrawler(config, resolver, session=session)


@pytest.fixture
def store(config, resolver, session):
    """FetchStore wired to the fake session (crawler shares it)."""
    return FetchStore(config, resolver, session=session)


# -------- Cache builders --------
@pytest.fixture
def cached_file(config):
    """
    Callable factory to place files directly in the cache.

    Usage:
        cached_file("css", "npm/x@1.0.0/x.css", b"...", mtime_ms=1_700_000_000_000)
    """

    def _factory(kind: str, rel: str, data: bytes = b"x", *, mtime_ms: int | None = None) -> Path:
        return write_cached(config.root_for(kind), rel, data, mtime_ms=mtime_ms)

    return _factory


# -------- Pytest markers --------
def pytest_configure(config):
    config.addinivalue_line("markers", "integration: marks integration tests")
