# sitewalker/crawler/fetcher.py
"""
Fetcher module: performs the single GET behind every page, with the fixed
per-request delay and latency measurement.
"""
from __future__ import annotations

import asyncio
import time

from aiohttp import ClientError, ClientSession

from sitewalker.crawler.models import Page, Response
from sitewalker.errors import FetchError
from sitewalker.logger import logger
from sitewalker.utils import is_valid_url


class Fetcher:
    """Fetches pages one at a time; transport failures are not retried."""

    def __init__(self, session: ClientSession, delay: float = 0.0) -> None:
        self.session = session
        self.delay = delay

    async def fetch(self, page: Page) -> bool:
        """
        GET ``page`` and store the response and request time on it.

        Returns False (without a request) when the page URL has no scheme or
        host. Raises :class:`FetchError` on connection, DNS or timeout errors.
        """
        url = page.url
        if not is_valid_url(url):
            logger.info("invalid URL", extra={"url": url})
            return False

        if self.delay > 0:
            await asyncio.sleep(self.delay)

        start = time.monotonic()
        try:
            async with self.session.request(page.request.method, url, allow_redirects=True) as resp:
                body = await resp.read()
                page.response = Response(
                    status=resp.status,
                    reason=resp.reason or "",
                    content_type=resp.headers.get("Content-Type", "").split(";", 1)[0].lower(),
                    body=body,
                )
        except (ClientError, asyncio.TimeoutError) as exc:
            page.request_time = _elapsed(start)
            logger.error("error getting the page", extra={"page": url, "error": repr(exc)})
            raise FetchError(url, exc) from exc

        page.request_time = _elapsed(start)
        logger.info(
            "fetched a page",
            extra={
                "page": url,
                "status": page.response.status_text,
                "request_time": page.request_time,
            },
        )
        return True


def _elapsed(start: float) -> str:
    return f"{int((time.monotonic() - start) * 1000)} ms"
