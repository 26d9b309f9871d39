# sitewalker/crawler/link_extractor.py
"""
Link discovery and classification for SiteWalker.
"""
from __future__ import annotations

from typing import List, Mapping, Optional, Sequence, Tuple, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

from sitewalker.crawler.models import LinkSet, Page, PageKind
from sitewalker.errors import ParseError
from sitewalker.logger import logger
from sitewalker.utils import normalize_link

#: tag name -> attributes inspected on it, first present one wins
AttributeMap = Mapping[str, Sequence[str]]

ANCHORS_ONLY: AttributeMap = {"a": ("href",)}
ALL_RESOURCES: AttributeMap = {
    "a": ("href", "data-href"),
    "link": ("href", "data-href"),
    "img": ("src",),
    "script": ("src",),
}


def parse_markup(page: Page, markup: Union[str, bytes]) -> BeautifulSoup:
    """Parse the fetched body of ``page``."""
    try:
        return BeautifulSoup(markup, "html.parser")
    except Exception as exc:
        logger.error("error parsing a page", extra={"page": page.url, "error": exc})
        raise ParseError(page.url, exc) from exc


def classify(value: str) -> Optional[Tuple[str, PageKind]]:
    """
    Classify a raw href/src value.

    Root-relative values (``/...``) are internal, same-page anchors (``#...``)
    are dropped, anything else is external.
    """
    if value.startswith("/"):
        return normalize_link(value), PageKind.INTERNAL
    if value.startswith("#") or not value.strip():
        return None
    return normalize_link(value), PageKind.EXTERNAL


def store(value: str, page: Page, visited: LinkSet) -> Optional[str]:
    """Record ``value`` on ``page`` unless it was ever seen before."""
    classified = classify(value)
    if classified is None:
        return None
    link, kind = classified
    if visited.contains(link):
        return None
    visited.add(link, kind)
    page.links.add(link, kind)
    logger.debug("classified a link", extra={"link": link, "kind": kind.name, "page": page.url})
    return link


def collect_links(
    document: BeautifulSoup, page: Page, visited: LinkSet, attributes: AttributeMap
) -> List[str]:
    """
    Walk every element of ``document`` in document order and store the
    links found in ``attributes`` on ``page``. Returns the newly stored links.
    """
    stored: List[str] = []
    for tag in document.find_all(list(attributes)):
        if not isinstance(tag, Tag):
            continue
        wanted = attributes[tag.name]
        for name, value in tag.attrs.items():
            if name not in wanted:
                continue
            if isinstance(value, list):
                value = " ".join(value)
            logger.debug(
                "collected a page", extra={"tag": tag.name, "attribute": name, "page": value}
            )
            link = store(str(value), page, visited)
            if link is not None:
                stored.append(link)
            break
    return stored
