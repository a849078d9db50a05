# tests/unit/test_css_crawler.py
from __future__ import annotations

from pathlib import Path

from cdn_mirror.core.css.crawler import CssDependencyCrawler
from tests.utils import font_resp, timeout_error

BASE = "https://cdn.example.com/npm/lib@1.0.0/dist/lib.css"
CSS_DIR = ("npm", "lib@1.0.0", "dist")


def _css_dir(config) -> Path:
    return config.css_root.joinpath(*CSS_DIR)


def test_primary_source_is_saved_next_to_stylesheet(crawler, session, config):
    session.routes["https://cdn.example.com/npm/lib@1.0.0/dist/fonts/a.woff2"] = font_resp(b"AAA")

    report = crawler.crawl(BASE, b"@font-face{src:url('./fonts/a.woff2')}")

    dest = _css_dir(config) / "fonts" / "a.woff2"
    assert dest.read_bytes() == b"AAA"
    assert report.found == 1 and report.fetched == 1 and report.failed == 0
    assert session.calls == ["https://cdn.example.com/npm/lib@1.0.0/dist/fonts/a.woff2"]


def test_falls_back_to_mirrors_in_order(crawler, session, config):
    primary = "https://cdn.example.com/npm/lib@1.0.0/dist/fonts/a.woff2"
    jsdelivr = "https://cdn.jsdelivr.net/npm/lib@1.0.0/dist/fonts/a.woff2"
    unpkg = "https://unpkg.com/lib@1.0.0/dist/fonts/a.woff2"
    session.routes[primary] = timeout_error(primary)
    session.routes[unpkg] = font_resp(b"FROM-UNPKG")
    # jsdelivr is unrouted -> 404

    crawler.crawl(BASE, b"a{src:url(fonts/a.woff2)}")

    assert session.calls == [primary, jsdelivr, unpkg]
    assert (_css_dir(config) / "fonts" / "a.woff2").read_bytes() == b"FROM-UNPKG"


def test_first_success_stops_the_chain(crawler, session):
    primary = "https://cdn.example.com/npm/lib@1.0.0/dist/fonts/a.woff2"
    session.routes[primary] = font_resp()

    crawler.crawl(BASE, b"a{src:url(fonts/a.woff2)}")

    assert session.calls == [primary]


def test_failed_reference_does_not_stop_the_rest(crawler, session, config):
    good = "https://cdn.example.com/npm/lib@1.0.0/dist/img/ok.png"
    session.routes[good] = font_resp(b"PNG")

    report = crawler.crawl(BASE, b"a{b:url(fonts/missing.woff)} c{d:url(img/ok.png)}")

    assert report.failed == 1 and report.fetched == 1
    assert report.failed_urls == ["https://cdn.example.com/npm/lib@1.0.0/dist/fonts/missing.woff"]
    assert (_css_dir(config) / "img" / "ok.png").exists()
    assert not (_css_dir(config) / "fonts" / "missing.woff").exists()


def test_unparsable_reference_is_counted_as_failed(crawler, session, config):
    good = "https://cdn.example.com/npm/lib@1.0.0/dist/img/ok.png"
    session.routes[good] = font_resp(b"PNG")

    report = crawler.crawl(BASE, b"a{b:url(//[broken/x.woff)} c{d:url(img/ok.png)}")

    assert report.found == 2
    assert report.failed == 1 and report.fetched == 1
    assert report.failed_urls == ["//[broken/x.woff"]
    assert (_css_dir(config) / "img" / "ok.png").read_bytes() == b"PNG"


def test_existing_dependency_is_not_refetched(crawler, session, config):
    dest = _css_dir(config) / "fonts" / "a.woff2"
    dest.parent.mkdir(parents=True)
    dest.write_bytes(b"old")

    report = crawler.crawl(BASE, b"a{src:url('fonts/a.woff2')}")

    assert session.calls == []
    assert report.skipped == 1
    assert dest.read_bytes() == b"old"


def test_no_references_creates_nothing(crawler, config):
    report = crawler.crawl(BASE, b"body{color:red}")
    assert report.found == 0
    assert not _css_dir(config).exists()


def test_query_and_parent_segments_are_normalised(crawler, session, config):
    url = "https://cdn.example.com/npm/lib@1.0.0/fonts/fa.woff2?v=4.7.0"
    session.routes[url] = font_resp(b"FA")

    crawler.crawl(BASE, b"a{src:url('../fonts/fa.woff2?v=4.7.0')}")

    # '..' dropped: stays inside the stylesheet's directory
    dest = _css_dir(config) / "fonts" / "fa.woff2"
    assert dest.read_bytes() == b"FA"


def test_hostname_fallback_directory_for_root_stylesheet(crawler, session, config):
    base = "https://fonts.example.com/style.css"
    session.routes["https://fonts.example.com/a.woff"] = font_resp(b"F")

    crawler.crawl(base, b"a{src:url(a.woff)}")

    assert (config.css_root / "fonts.example.com" / "a.woff").read_bytes() == b"F"


def test_absolute_reference_is_placed_by_its_path(crawler, session, config):
    ref = "https://other.example.com/s/roboto/v30/r.woff2"
    session.routes[ref] = font_resp(b"R")

    crawler.crawl(BASE, f"a{{src:url({ref})}}".encode())

    assert (_css_dir(config) / "s" / "roboto" / "v30" / "r.woff2").read_bytes() == b"R"


def test_crawler_uses_configured_timeout_and_agent(config, session):
    cfg = config.model_copy(update={"timeout_s": 3.5, "user_agent": "Test/1.0"})
    session.routes["https://cdn.example.com/npm/lib@1.0.0/dist/a.png"] = font_resp()

    CssDependencyCrawler(cfg, session=session).crawl(BASE, b"a{b:url(a.png)}")

    assert session.last_timeout == 3.5
    assert session.last_headers is not None and session.last_headers["User-Agent"] == "Test/1.0"
