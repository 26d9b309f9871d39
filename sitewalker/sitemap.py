# File: sitewalker/sitemap.py
"""sitewalker.sitemap: Дерево страниц сайта, его текстовое представление и экспорт в sitemap.xml."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

import click
from lxml import etree

from sitewalker.crawler.models import Page
from sitewalker.crawler.tree import Node, Tree
from sitewalker.errors import OutputError
from sitewalker.logger import logger as default_logger
from sitewalker.utils import ensure_directory

__all__ = ["Sitemap", "parse_sitemap", "read_sitemap_xml", "SITEMAP_NS", "XML_HEADER"]

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
SITEMAP_FILENAME = "sitemap.xml"

_INDENT = 4
_BRANCH = "├───"
_LAST_BRANCH = "└───"
_BAR = "│"


class Sitemap(Tree[Page]):
    """Дерево :class:`Page`, построенное обходом сайта."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        super().__init__()
        self.logger = logger or default_logger

    @property
    def root_page(self) -> Page:
        if self.root is None:
            raise LookupError("sitemap is empty")
        return self.root.element

    def urls(self) -> List[str]:
        """Уникальные URL страниц в порядке preorder."""
        return list(dict.fromkeys(node.element.url for node in self.preorder()))

    # ------------------------------------------------------------------ #
    # text                                                               #
    # ------------------------------------------------------------------ #

    def _line(self, node: Node[Page]) -> str:
        url = node.element.url
        parent = self.parent(node)
        if parent is None:
            return url
        glyph = _LAST_BRANCH if parent.child_handles[-1] == node.handle else _BRANCH
        level = self.depth(node) - 1
        indent = " " * (level * _INDENT)
        if level == 0:
            prefix = indent
        elif level % 2 == 0:
            prefix = f"{_BAR}{indent} "
        else:
            prefix = f"{_BAR}{indent}"
        return f"{prefix}{glyph} {url}"

    def render(self) -> str:
        """Дерево в виде отступов с псевдографикой, корень без ветки."""
        return "".join(f"{self._line(node)}\n" for node in self.preorder())

    __str__ = render

    def print(self) -> None:
        click.echo(f"\n{self.render()}")

    # ------------------------------------------------------------------ #
    # XML                                                                #
    # ------------------------------------------------------------------ #

    def to_xml_string(self) -> str:
        urlset = etree.Element(f"{{{SITEMAP_NS}}}urlset", nsmap={None: SITEMAP_NS})
        for url in self.urls():
            entry = etree.SubElement(urlset, f"{{{SITEMAP_NS}}}url")
            etree.SubElement(entry, f"{{{SITEMAP_NS}}}loc").text = url
        body = etree.tostring(urlset, pretty_print=True, encoding="unicode")
        return XML_HEADER + body

    def to_xml(self, directory: Union[str, Path]) -> Path:
        """Сохраняет ``<directory>/sitemap.xml`` и возвращает путь к файлу.

        Каталог создаётся при необходимости; URL, встречающийся в дереве
        несколько раз, записывается один раз.
        """
        directory = ensure_directory(directory)
        path = directory / SITEMAP_FILENAME
        try:
            path.write_text(self.to_xml_string(), encoding="utf-8")
        except OSError as exc:
            self.logger.error("sitemap file not created", extra={"path": path, "error": exc})
            raise OutputError(f"cannot write {path}: {exc}") from exc

        self.logger.info("sitemap saved", extra={"path": path, "urls": len(self.urls())})
        return path


def parse_sitemap(xml_content: str) -> List[str]:
    """Разбирает XML content sitemap и возвращает список URL из тегов <loc>."""
    parser = etree.XMLParser(ns_clean=True, recover=True)
    root = etree.fromstring(xml_content.encode("utf-8"), parser=parser)
    if root is None:
        return []
    locs = root.findall(".//{*}loc")
    return [loc.text.strip() for loc in locs if loc.text]


def read_sitemap_xml(path: Union[str, Path]) -> List[str]:
    """Читает sitemap.xml с диска и возвращает URL из <loc>."""
    return parse_sitemap(Path(path).read_text(encoding="utf-8"))
