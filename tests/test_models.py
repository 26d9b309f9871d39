# File: tests/test_models.py
import pytest

from sitewalker.crawler.models import LinkSet, Page, PageKind, Request, Response


def test_new_page_defaults():
    page = Page.new("https://example.com/about")
    assert page.kind is PageKind.UNKNOWN
    assert page.request == Request("https://example.com/about", "GET")
    assert page.url == "https://example.com/about"
    assert page.response is None
    assert len(page.links) == 0


def test_page_kind_values():
    assert PageKind.INTERNAL == 0
    assert PageKind.EXTERNAL == 1
    assert PageKind.UNKNOWN == -1


@pytest.mark.parametrize("raw", ["/about", "/about/", "  /about/ ", "\t/about\n"])
def test_linkset_normalizes_on_insert_and_lookup(raw):
    links = LinkSet()
    assert links.add(raw, PageKind.INTERNAL)
    assert "/about" in links
    assert links.contains(" /about/ ")
    assert list(links) == ["/about"]


def test_linkset_first_writer_wins():
    links = LinkSet()
    assert links.add("https://other.com", PageKind.EXTERNAL)
    assert not links.add("https://other.com/", PageKind.INTERNAL)
    assert links.kind("https://other.com") is PageKind.EXTERNAL
    assert len(links) == 1


def test_linkset_keeps_insertion_order():
    links = LinkSet()
    for link in ("/c", "/a", "/b"):
        links.add(link, PageKind.INTERNAL)
    assert [k for k, _ in links.items()] == ["/c", "/a", "/b"]


def test_linkset_unknown_kind_for_missing_link():
    assert LinkSet().kind("/nope") is PageKind.UNKNOWN


@pytest.mark.parametrize(
    "status,reason,expected",
    [
        (200, "OK", "200 OK"),
        (404, "Not Found", "404 Not Found"),
        (999, "", "999 Request Denied"),
        (999, "Unknown", "999 Request Denied"),
    ],
)
def test_response_status_text(status, reason, expected):
    assert Response(status=status, reason=reason).status_text == expected


@pytest.mark.parametrize(
    "content_type,is_html",
    [("text/html", True), ("application/xhtml+xml", True), ("", True), ("image/png", False)],
)
def test_response_is_html(content_type, is_html):
    assert Response(200, "OK", content_type=content_type).is_html is is_html


def test_response_release_drops_body():
    response = Response(200, "OK", body=b"<html></html>")
    assert response.release() == b"<html></html>"
    assert response.body is None
