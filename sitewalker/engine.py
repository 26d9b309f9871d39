# File: sitewalker/engine.py
"""sitewalker.engine: Orchestration layer для запуска обхода в каждом из режимов."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

from sitewalker.config import CrawlOptions
from sitewalker.crawler.models import LinkRecord
from sitewalker.crawler.modes import (
    CrawlStrategy,
    LinkTestStrategy,
    PageCapturer,
    ScreenshotStrategy,
    SitemapStrategy,
)
from sitewalker.crawler.spider import Spider
from sitewalker.logger import logger
from sitewalker.progress import animate
from sitewalker.screenshot import PlaywrightCapturer
from sitewalker.sitemap import Sitemap
from sitewalker.utils import ensure_directory

__all__ = ["run_crawl", "build_sitemap", "check_links", "take_screenshots"]


async def run_crawl(
    root: str,
    options: CrawlOptions,
    strategy: CrawlStrategy,
    *,
    progress_label: Optional[str] = None,
) -> Sitemap:
    """
    Обходит сайт ``root`` в режиме ``strategy``.

    Пока идёт обход, при ``progress_label`` и без ``--debug`` крутится
    анимация; она останавливается сигналом ``done`` и при ошибке обхода.
    """
    done = asyncio.Event()
    spinner: Optional[asyncio.Task[int]] = None
    if progress_label and not options.debug:
        spinner = asyncio.create_task(animate(progress_label, done))
    try:
        async with Spider(options, strategy) as spider:
            return await spider.crawl(root)
    except Exception as exc:
        logger.debug("crawl aborted", extra={"root": root, "error": repr(exc)})
        raise
    finally:
        done.set()
        if spinner is not None:
            await spinner


async def build_sitemap(root: str, options: CrawlOptions) -> Sitemap:
    """Режим sitemap: дерево внутренних страниц и их внешних ссылок."""
    return await run_crawl(root, options, SitemapStrategy(), progress_label="collecting links")


async def check_links(root: str, options: CrawlOptions, *, collect_records: bool) -> List[LinkRecord]:
    """Режим test: печатает статус каждой ссылки и возвращает записи для JSON-отчёта."""
    strategy = LinkTestStrategy(
        collect_records=collect_records, descend_external=options.descend_external
    )
    await run_crawl(root, options, strategy)
    return strategy.records


async def take_screenshots(
    root: str, options: CrawlOptions, capturer: Optional[PageCapturer] = None
) -> List[Path]:
    """Режим screenshot: JPEG каждой внутренней страницы в ``options.directory``."""
    if options.directory is None:
        raise ValueError("screenshot mode requires a directory")
    directory = ensure_directory(options.directory)

    if capturer is not None:
        strategy = ScreenshotStrategy(capturer, directory)
        await run_crawl(root, options, strategy, progress_label="taking screenshots")
        return strategy.saved

    async with PlaywrightCapturer(timeout=options.timeout) as browser:
        strategy = ScreenshotStrategy(browser, directory)
        await run_crawl(root, options, strategy, progress_label="taking screenshots")
        return strategy.saved
