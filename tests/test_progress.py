# File: tests/test_progress.py
# Spinner, engine orchestration and log line format
from __future__ import annotations

import asyncio
import logging

import click
import pytest

from sitewalker import engine
from sitewalker.config import CrawlOptions
from sitewalker.crawler.modes import SitemapStrategy
from sitewalker.errors import InvalidURLError
from sitewalker.logger import KeyValueFormatter
from sitewalker.progress import FRAMES, animate, success


@pytest.mark.asyncio()
async def test_animate_redraws_until_done():
    drawn: list[str] = []

    def echo(message="", nl=True):
        drawn.append(message)

    done = asyncio.Event()
    task = asyncio.create_task(animate("collecting links", done, interval=0.01, echo=echo))
    await asyncio.sleep(0.05)
    done.set()
    frames = await task

    assert frames >= 2
    assert len(drawn) == frames + 1
    assert all(line.startswith("\r") for line in drawn[:-1])
    assert "collecting links" in click.unstyle(drawn[0])
    assert click.unstyle(drawn[0]).endswith(FRAMES[0])


@pytest.mark.asyncio()
async def test_animate_draws_nothing_when_already_done():
    done = asyncio.Event()
    done.set()
    assert await animate("x", done, echo=lambda *a, **k: pytest.fail("drawn")) == 0


def test_success_line():
    lines: list[str] = []
    success("sitemap was created!", echo=lines.append)
    assert click.unstyle(lines[0]) == "[SUCCESS] sitemap was created!"


@pytest.mark.asyncio()
async def test_run_crawl_stops_spinner_on_failure(monkeypatch):
    started = {}

    async def fake_animate(label, done):
        started["label"] = label
        await done.wait()
        return 0

    monkeypatch.setattr(engine, "animate", fake_animate)
    with pytest.raises(InvalidURLError):
        await asyncio.wait_for(
            engine.run_crawl("not-a-url", CrawlOptions(), SitemapStrategy(), progress_label="go"),
            timeout=5,
        )
    assert started == {"label": "go"}


@pytest.mark.asyncio()
async def test_run_crawl_has_no_spinner_in_debug(monkeypatch, serve):
    monkeypatch.setattr(engine, "animate", lambda *a, **k: pytest.fail("spinner started"))
    site = await serve({"/": '<a href="/a">A</a>', "/a": ""})
    sitemap = await engine.build_sitemap(site.url, CrawlOptions(debug=True))
    assert sitemap.size == 2


@pytest.mark.asyncio()
async def test_check_links_collects_records(serve, monkeypatch):
    monkeypatch.setattr(engine, "animate", lambda *a, **k: pytest.fail("spinner started"))
    site = await serve({"/": '<a href="/missing">x</a>'})
    records = await engine.check_links(site.url, CrawlOptions(), collect_records=True)
    assert [r["status"] for r in records] == ["200 OK", "404 Not Found"]


def test_key_value_formatter():
    record = logging.LogRecord("SiteWalker", logging.INFO, __file__, 1, "fetched a page", None, None)
    record.page = "https://example.com"
    record.status = "200 OK"
    line = KeyValueFormatter(color=False).format(record)
    assert line == "[INFO] fetched a page page=https://example.com status=200 OK"


def test_key_value_formatter_without_fields():
    record = logging.LogRecord("SiteWalker", logging.ERROR, __file__, 1, "boom", None, None)
    assert KeyValueFormatter(color=False).format(record) == "[ERROR] boom"
    assert click.unstyle(KeyValueFormatter().format(record)) == "[ERROR] boom"
