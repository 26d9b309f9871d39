# File: sitewalker/errors.py
"""sitewalker.errors: Exceptions raised by the crawl engine and its output adapters."""

from __future__ import annotations

__all__ = [
    "SiteWalkerError",
    "TreeError",
    "AlreadyRootedError",
    "InvalidURLError",
    "FetchError",
    "ParseError",
    "OutputError",
    "CaptureError",
]


class SiteWalkerError(Exception):
    """Base class for every error raised by SiteWalker."""


class TreeError(SiteWalkerError):
    """A node was used with a tree it does not belong to."""


class AlreadyRootedError(TreeError):
    """add_root() was called on a tree that already has a root."""


class InvalidURLError(SiteWalkerError, ValueError):
    """The URL is missing a scheme or a host."""

    def __init__(self, url: str) -> None:
        super().__init__(f"missing or invalid URL: {url!r}")
        self.url = url


class FetchError(SiteWalkerError):
    """Transport-level failure while requesting a page (DNS, refused, timeout)."""

    def __init__(self, url: str, reason: object) -> None:
        super().__init__(f"error getting the page {url}: {reason}")
        self.url = url
        self.reason = reason


class ParseError(SiteWalkerError):
    """The fetched markup could not be parsed."""

    def __init__(self, url: str, reason: object) -> None:
        super().__init__(f"error parsing the page {url}: {reason}")
        self.url = url


class OutputError(SiteWalkerError):
    """A report, sitemap or screenshot file could not be written."""


class CaptureError(SiteWalkerError):
    """The headless browser failed to render or capture a page."""
