# sitewalker/crawler/models.py
"""
Data models for the SiteWalker crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Iterator, Optional, Tuple, TypedDict

from sitewalker.utils import normalize_link

__all__ = ("PageKind", "LinkSet", "Request", "Response", "Page", "LinkRecord", "REQUEST_DENIED")

#: non-standard status some sites answer crawlers with
REQUEST_DENIED = 999


class PageKind(IntEnum):
    """Classification of a page relative to the crawl root."""

    UNKNOWN = -1
    INTERNAL = 0
    EXTERNAL = 1


class LinkSet:
    """Set of normalized links, each tagged with a :class:`PageKind`.

    Keys are stripped of surrounding whitespace and one trailing slash on
    insertion and on every lookup. The first kind recorded for a key sticks.
    """

    __slots__ = ("_links",)

    def __init__(self) -> None:
        self._links: Dict[str, PageKind] = {}

    def add(self, link: str, kind: PageKind) -> bool:
        """Record ``link``; returns False when it was already present."""
        key = normalize_link(link)
        if key in self._links:
            return False
        self._links[key] = kind
        return True

    def contains(self, link: str) -> bool:
        return normalize_link(link) in self._links

    __contains__ = contains

    def kind(self, link: str) -> PageKind:
        return self._links.get(normalize_link(link), PageKind.UNKNOWN)

    def items(self) -> Iterator[Tuple[str, PageKind]]:
        return iter(list(self._links.items()))

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._links))

    def __len__(self) -> int:
        return len(self._links)

    def __repr__(self) -> str:
        return f"LinkSet({self._links!r})"


@dataclass(slots=True, frozen=True)
class Request:
    """Target of a fetch; SiteWalker only ever issues GET."""

    url: str
    method: str = "GET"


@dataclass(slots=True)
class Response:
    """What came back for a :class:`Request`."""

    status: int
    reason: str
    content_type: str = ""
    body: Optional[bytes] = None

    @property
    def status_text(self) -> str:
        """``"404 Not Found"`` style status line."""
        if self.status == REQUEST_DENIED:
            return f"{REQUEST_DENIED} Request Denied"
        return f"{self.status} {self.reason}".strip()

    @property
    def is_html(self) -> bool:
        # servers that omit the header still get parsed
        return not self.content_type or "html" in self.content_type

    def release(self) -> Optional[bytes]:
        """Hand the body over and drop it from the response."""
        body, self.body = self.body, None
        return body


@dataclass(slots=True, eq=False)
class Page:
    """Payload of every sitemap node."""

    request: Request
    kind: PageKind = PageKind.UNKNOWN
    links: LinkSet = field(default_factory=LinkSet)
    response: Optional[Response] = None
    request_time: str = ""
    parent_url: str = ""

    @classmethod
    def new(cls, url: str, kind: PageKind = PageKind.UNKNOWN, parent_url: str = "") -> Page:
        return cls(request=Request(url), kind=kind, parent_url=parent_url)

    @property
    def url(self) -> str:
        return self.request.url

    def __repr__(self) -> str:
        return f"<Page {self.url} {self.kind.name}>"


class LinkRecord(TypedDict):
    """One line of the link-test JSON report."""

    url: str
    status: str
    requestTime: str
    parentURL: str
