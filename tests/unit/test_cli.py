# tests/unit/test_cli.py
from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

import mirror_cli
from cdn_mirror.logging import LOGGER_NAME
from tests.utils import FakeSession, js_resp, write_cached


@pytest.fixture(autouse=True)
def _restore_package_logger():
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    yield
    for h in list(logger.handlers):
        logger.removeHandler(h)
    for h in handlers:
        logger.addHandler(h)
    logger.setLevel(level)


def test_catalog_command_prints_json(tmp_path: Path, capsys):
    cache = tmp_path / "cache"
    write_cached(cache / "js", "npm/a@1.0.0/a.js", b"x")

    rc = mirror_cli.main(["--cache-root", str(cache), "--pretty", "0", "catalog", "--type", "js", "--page-size", "10"])

    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out["total"] == 1 and out["pageSize"] == 20
    assert out["items"][0]["name"] == "a"


def test_seed_command_uses_seed_file(tmp_path: Path, capsys, monkeypatch):
    url = "https://cdn.example.com/lib/a.js"
    session = FakeSession({url: js_resp()})
    monkeypatch.setattr("cdn_mirror.core.fetch.store.new_session", lambda ua: session)
    seed = tmp_path / "seed.txt"
    seed.write_text(f"# assets\n\n{url}\n", encoding="utf-8")

    rc = mirror_cli.main(
        ["--cache-root", str(tmp_path / "cache"), "seed", "--file", str(seed), "--base-url", "http://localhost:3000"]
    )

    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out["count"] == 1
    assert out["results"][0]["accessUrl"] == "http://localhost:3000/js/lib/a.js"
    assert (tmp_path / "cache" / "js" / "lib" / "a.js").exists()
