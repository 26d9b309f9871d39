# File: tests/conftest.py
from __future__ import annotations

from collections import Counter
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from typing import Union

import pytest
import pytest_asyncio
from aiohttp import web

from sitewalker.config import CrawlOptions
from sitewalker.crawler.models import Page, PageKind
from sitewalker.crawler.modes import CrawlStrategy
from sitewalker.crawler.spider import Spider
from sitewalker.logger import init_logging
from sitewalker.sitemap import Sitemap

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]
Route = Union[str, Handler]


def html(body: str) -> Handler:
    """Handler answering with an HTML document wrapping *body*."""

    async def handle(_: web.Request) -> web.Response:
        return web.Response(
            text=f"<html><body>{body}</body></html>", content_type="text/html"
        )

    return handle


class SiteServer:
    """Local aiohttp site that counts how often each path is requested."""

    def __init__(self) -> None:
        self.hits: Counter[str] = Counter()
        self.url = ""

    def app(self, routes: Mapping[str, Route]) -> web.Application:
        @web.middleware
        async def count(request: web.Request, handler: Handler) -> web.StreamResponse:
            self.hits[request.path] += 1
            return await handler(request)

        app = web.Application(middlewares=[count])
        for path, route in routes.items():
            app.router.add_get(path, html(route) if isinstance(route, str) else route)
        return app


@pytest_asyncio.fixture
async def serve(unused_tcp_port_factory) -> AsyncIterator[Callable[..., Awaitable[SiteServer]]]:
    """Factory starting a :class:`SiteServer` per call; all are cleaned up after the test."""
    runners: list[web.AppRunner] = []

    async def _serve(routes: Mapping[str, Route]) -> SiteServer:
        server = SiteServer()
        runner = web.AppRunner(server.app(routes))
        await runner.setup()
        port = unused_tcp_port_factory()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        runners.append(runner)
        server.url = f"http://127.0.0.1:{port}"
        return server

    yield _serve
    for runner in runners:
        await runner.cleanup()


async def run_spider(
    root: str, strategy: CrawlStrategy, **options
) -> tuple[Sitemap, Spider]:
    """Crawl *root* with a fresh spider and return the sitemap and the spider."""
    async with Spider(CrawlOptions(**options), strategy) as spider:
        sitemap = await spider.crawl(root)
    return sitemap, spider


def child_urls(sitemap: Sitemap, node=None) -> list[str]:
    node = node if node is not None else sitemap.root
    return [c.element.url for c in sitemap.children(node)]


@pytest.fixture()
def sample_sitemap() -> Sitemap:
    """
    https://example.com
    ├── /a
    │   ├── /a/1
    │   └── /a/2
    │       └── /a/2/x
    └── /b
    """
    sitemap = Sitemap()
    root = sitemap.add_root(Page.new("https://example.com", PageKind.INTERNAL))
    a = sitemap.add_child(root, Page.new("https://example.com/a", PageKind.INTERNAL))
    sitemap.add_child(a, Page.new("https://example.com/a/1", PageKind.INTERNAL))
    a2 = sitemap.add_child(a, Page.new("https://example.com/a/2", PageKind.INTERNAL))
    sitemap.add_child(a2, Page.new("https://example.com/a/2/x", PageKind.INTERNAL))
    sitemap.add_child(root, Page.new("https://example.com/b", PageKind.INTERNAL))
    return sitemap


@pytest.fixture()
def debug_logging():
    """Логгер на уровне DEBUG, как при ``--debug``."""
    yield init_logging(debug=True)
    init_logging()
