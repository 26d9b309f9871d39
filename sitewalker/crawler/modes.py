# sitewalker/crawler/modes.py
"""
Run modes of the spider.

A strategy is picked once per run and answers three questions for the
traversal: which tag attributes hold links, whether to descend into a newly
attached child, and what to do with every fetched page.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Protocol

import click

from sitewalker.crawler.link_extractor import ALL_RESOURCES, ANCHORS_ONLY, AttributeMap
from sitewalker.crawler.models import REQUEST_DENIED, LinkRecord, Page, PageKind
from sitewalker.errors import OutputError
from sitewalker.logger import logger
from sitewalker.utils import sanitize_filename

__all__ = (
    "CrawlMode",
    "CrawlStrategy",
    "SitemapStrategy",
    "LinkTestStrategy",
    "ScreenshotStrategy",
    "PageCapturer",
    "status_color",
)


class CrawlMode(str, Enum):
    SITEMAP = "sitemap"
    TEST = "test"
    SCREENSHOT = "screenshot"


class PageCapturer(Protocol):
    """Anything able to render a URL and return JPEG bytes."""

    async def capture(self, url: str) -> bytes: ...


class CrawlStrategy(ABC):
    """Mode-specific behaviour plugged into the spider."""

    mode: CrawlMode
    attributes: AttributeMap = ANCHORS_ONLY

    def should_descend(self, page: Page) -> bool:
        return page.kind is PageKind.INTERNAL

    @abstractmethod
    async def on_page_fetched(self, page: Page) -> None:
        """Called once for every page right after a successful fetch."""


class SitemapStrategy(CrawlStrategy):
    mode = CrawlMode.SITEMAP

    async def on_page_fetched(self, page: Page) -> None:
        return None


def status_color(status: int) -> Optional[str]:
    """Colour of the status band ``status`` falls into."""
    if status == REQUEST_DENIED:
        return "magenta"
    if 100 <= status <= 199:
        return "blue"
    if 200 <= status <= 299:
        return "green"
    if 300 <= status <= 399:
        return "yellow"
    if 400 <= status <= 599:
        return "red"
    return None


class LinkTestStrategy(CrawlStrategy):
    """Reports the status of every link found in anchors, links, images and scripts."""

    mode = CrawlMode.TEST
    attributes = ALL_RESOURCES

    def __init__(
        self,
        *,
        collect_records: bool = False,
        descend_external: bool = True,
        echo: Callable[[str], None] = click.echo,
    ) -> None:
        self.collect_records = collect_records
        self.descend_external = descend_external
        self.records: List[LinkRecord] = []
        self._echo = echo

    def should_descend(self, page: Page) -> bool:
        return page.kind is PageKind.INTERNAL or self.descend_external

    def format_line(self, page: Page) -> str:
        if page.response is None:
            raise ValueError(f"page {page.url} has not been fetched")
        status = click.style(page.response.status_text, fg=status_color(page.response.status))
        details = click.style(f"{page.request_time}  parent {page.parent_url}", dim=True)
        return f"{page.url}  {status}  {details}"

    async def on_page_fetched(self, page: Page) -> None:
        if page.response is None:
            return
        self._echo(self.format_line(page))
        if self.collect_records:
            self.records.append(
                LinkRecord(
                    url=page.url,
                    status=page.response.status_text,
                    requestTime=page.request_time,
                    parentURL=page.parent_url,
                )
            )


class ScreenshotStrategy(CrawlStrategy):
    """Saves a full-page JPEG of every internal page."""

    mode = CrawlMode.SCREENSHOT

    def __init__(self, capturer: PageCapturer, directory: Path) -> None:
        self.capturer = capturer
        self.directory = Path(directory)
        self.saved: List[Path] = []

    async def on_page_fetched(self, page: Page) -> None:
        if page.kind is not PageKind.INTERNAL:
            return
        path = sanitize_filename(page.url, "jpeg", self.directory)
        image = await self.capturer.capture(page.url)
        try:
            path.write_bytes(image)
        except OSError as exc:
            logger.error("error writing data to image file", extra={"path": path, "error": exc})
            raise OutputError(f"cannot write screenshot {path}: {exc}") from exc
        logger.info("saved a screenshot", extra={"page": page.url, "path": path})
        self.saved.append(path)
