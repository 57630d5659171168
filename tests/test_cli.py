# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the layoutcrawl CLI."""

from __future__ import annotations

import json

import pytest

from layoutcrawl import CrawledElement, CrawledLayout, ElementType, RawPage
from layoutcrawl.cli import build_parser, main

pytestmark = pytest.mark.usefixtures("reset_logging")

LAYOUT = CrawledLayout(
    url="https://example.com/",
    title="Demo",
    structure=(CrawledElement(id="element-0", tag="main", type=ElementType.LAYOUT, label="Main Content"),),
)


@pytest.fixture
def fake_crawl(monkeypatch):
    calls: list[dict] = []

    async def _crawl(url, *, return_html=False, settings=None, transport=None):
        calls.append({"url": url, "return_html": return_html, "settings": settings})
        if return_html:
            return RawPage(url="https://example.com/", title="Demo", html="<html></html>")
        return LAYOUT

    monkeypatch.setattr("layoutcrawl.crawler.crawl", _crawl)
    return calls


class TestCrawlCommand:
    def test_prints_json(self, fake_crawl, capsys):
        main(["crawl", "https://example.com"])
        out = json.loads(capsys.readouterr().out)
        assert out["title"] == "Demo"
        assert out["structure"][0]["label"] == "Main Content"
        assert fake_crawl[0]["return_html"] is False

    def test_html_flag(self, fake_crawl, capsys):
        main(["crawl", "https://example.com", "--html"])
        out = json.loads(capsys.readouterr().out)
        assert out["html"] == "<html></html>"
        assert fake_crawl[0]["return_html"] is True

    def test_flags_override_settings(self, fake_crawl, monkeypatch):
        monkeypatch.setenv("LAYOUTCRAWL_MAX_DEPTH", "4")
        main(["crawl", "https://example.com", "--timeout", "2.5"])
        settings = fake_crawl[0]["settings"]
        assert settings.timeout == 2.5
        assert settings.max_depth == 4

    def test_output_file(self, fake_crawl, tmp_path, capsys):
        target = tmp_path / "out" / "site.json"
        main(["crawl", "https://example.com", "-o", str(target)])
        assert json.loads(target.read_text())["url"] == "https://example.com/"
        assert "Saved to" in capsys.readouterr().err

    def test_invalid_url_exits_with_hint(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["crawl", "not a url"])
        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "Error: Invalid URL format" in err
        assert "Hint:" in err

    def test_negative_timeout_rejected(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["crawl", "https://example.com", "--timeout", "-1"])
        assert exc_info.value.code == 2
        assert "timeout must be positive" in capsys.readouterr().err

    def test_unknown_argument_rejected(self):
        with pytest.raises(SystemExit):
            main(["crawl", "https://example.com", "--bogus"])


class TestServeCommand:
    def test_forwards_args(self, monkeypatch):
        received: list[list[str]] = []
        monkeypatch.setattr("layoutcrawl.server.main", lambda argv=None: received.append(argv))
        main(["serve", "--transport", "http", "--port", "9000"])
        assert received == [["--transport", "http", "--port", "9000"]]


class TestParser:
    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
