# File: sitewalker/screenshot.py
"""sitewalker.screenshot: Headless Chromium capture of full-page JPEG screenshots."""

from __future__ import annotations

from typing import Optional

from playwright.async_api import Browser, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from sitewalker.errors import CaptureError
from sitewalker.logger import logger

__all__ = ["PlaywrightCapturer"]


class PlaywrightCapturer:
    """Renders a URL in headless Chromium and returns a full-page JPEG.

    Use as an async context manager; the browser is shared by every capture
    of the run::

        async with PlaywrightCapturer() as capturer:
            image = await capturer.capture("https://example.com")
    """

    def __init__(self, *, timeout: float = 30.0, quality: int = 90) -> None:
        self.timeout_ms = timeout * 1000
        self.quality = quality
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self) -> PlaywrightCapturer:
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(headless=True)
        except PlaywrightError as exc:
            await self._playwright.stop()
            raise CaptureError(f"cannot launch headless browser: {exc}") from exc
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def capture(self, url: str) -> bytes:
        if self._browser is None:
            raise RuntimeError("Browser not initialized")
        page = await self._browser.new_page()
        try:
            await page.goto(url, timeout=self.timeout_ms)
            await page.wait_for_selector("body", state="visible", timeout=self.timeout_ms)
            image = await page.screenshot(full_page=True, type="jpeg", quality=self.quality)
        except PlaywrightError as exc:
            logger.error("error running the headless browser", extra={"url": url, "error": exc})
            raise CaptureError(f"cannot capture {url}: {exc}") from exc
        finally:
            await page.close()
        logger.debug("captured a page", extra={"url": url, "bytes": len(image)})
        return image
