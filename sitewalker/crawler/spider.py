# === FILE: sitewalker/crawler/spider.py ===
from __future__ import annotations

import time
from typing import List, Optional
from urllib.parse import urlsplit

from aiohttp import ClientSession, ClientTimeout

from sitewalker.config import CrawlOptions
from sitewalker.crawler.fetcher import Fetcher
from sitewalker.crawler.link_extractor import collect_links, parse_markup
from sitewalker.crawler.models import LinkSet, Page, PageKind
from sitewalker.crawler.modes import CrawlStrategy
from sitewalker.crawler.tree import Node
from sitewalker.errors import InvalidURLError
from sitewalker.logger import logger
from sitewalker.sitemap import Sitemap
from sitewalker.utils import is_valid_url, normalize_link, origin

__all__ = ("Spider",)


class Spider:
    """
    Builds a sitemap by walking a site depth-first from its root.

    Every link is registered in :attr:`visited` the moment it is discovered,
    before its page is fetched, so no page is ever attached or fetched twice.
    """

    def __init__(self, options: CrawlOptions, strategy: CrawlStrategy) -> None:
        self.options = options
        self.strategy = strategy
        self.visited = LinkSet()
        self.session: Optional[ClientSession] = None
        self._fetcher: Optional[Fetcher] = None

    async def __aenter__(self) -> Spider:
        timeout = ClientTimeout(total=self.options.timeout)
        self.session = ClientSession(
            timeout=timeout,
            headers={"User-Agent": self.options.user_agent},
            raise_for_status=False,
        )
        self._fetcher = Fetcher(self.session, delay=self.options.delay_seconds)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self, root: str) -> Sitemap:
        """Walk the site under ``root`` and return the finished sitemap."""
        if not is_valid_url(root):
            logger.error("missing or invalid URL", extra={"url": root})
            raise InvalidURLError(root)
        if self._fetcher is None:
            raise RuntimeError("Session not initialized")

        sitemap = Sitemap()
        page = Page.new(root, PageKind.INTERNAL, parent_url=root)
        node = sitemap.add_root(page)
        self._register_root(page)

        logger.info("crawl started", extra={"root": root, "mode": self.strategy.mode.value})
        start = time.monotonic()
        await self.walk(sitemap, node)
        logger.info(
            "crawl finished",
            extra={"pages": sitemap.size, "seconds": f"{time.monotonic() - start:.2f}"},
        )
        return sitemap

    async def walk(self, sitemap: Sitemap, node: Node[Page]) -> None:
        """
        Fetch, parse and expand ``node`` and, depth-first, every child the
        strategy descends into. Children are visited in the order they were
        attached, which is the order their links appear in the markup.
        """
        stack: List[Node[Page]] = [node]
        while stack:
            current = stack.pop()
            children = await self._expand(sitemap, current)
            stack.extend(
                child for child in reversed(children) if self.strategy.should_descend(child.element)
            )

    async def _expand(self, sitemap: Sitemap, node: Node[Page]) -> List[Node[Page]]:
        if self._fetcher is None:
            raise RuntimeError("Session not initialized")
        page = node.element
        if not await self._fetcher.fetch(page):
            return []
        await self.strategy.on_page_fetched(page)

        # external pages are leaves
        if page.kind is not PageKind.INTERNAL:
            return []

        if sitemap.is_root(node):
            self._register_root(page)

        if page.response is None:
            return []
        body = page.response.release()
        if not page.response.is_html:
            logger.debug(
                "skipped a non-HTML page",
                extra={"page": page.url, "content_type": page.response.content_type},
            )
            return []

        document = parse_markup(page, body or b"")
        collect_links(document, page, self.visited, self.strategy.attributes)
        return self._attach(sitemap, node)

    def _attach(self, sitemap: Sitemap, node: Node[Page]) -> List[Node[Page]]:
        page = node.element
        base = origin(sitemap.root_page.url)
        children: List[Node[Page]] = []
        for link, kind in page.links.items():
            try:
                url = urlsplit(base + link if kind is PageKind.INTERNAL else link).geturl()
            except ValueError as exc:
                logger.error("error parsing a page URL", extra={"page": link, "error": exc})
                continue
            child = sitemap.add_child(node, Page.new(url, kind, parent_url=page.url))
            logger.debug(
                "attached a page",
                extra={"page": url, "kind": kind.name, "parent": page.url},
            )
            children.append(child)
        return children

    def _register_root(self, page: Page) -> None:
        # both the absolute URL and the root-relative form a page would link with
        parts = urlsplit(page.url)
        path = parts.path + (f"?{parts.query}" if parts.query else "")
        self.visited.add(page.url, PageKind.INTERNAL)
        self.visited.add(normalize_link(path), PageKind.INTERNAL)
