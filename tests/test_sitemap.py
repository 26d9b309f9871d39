# File: tests/test_sitemap.py
import pytest

from sitewalker.crawler.models import Page, PageKind
from sitewalker.errors import OutputError
from sitewalker.sitemap import SITEMAP_NS, Sitemap, parse_sitemap, read_sitemap_xml


def test_render_outline(sample_sitemap):
    assert sample_sitemap.render().splitlines() == [
        "https://example.com",
        "├─── https://example.com/a",
        "│    ├─── https://example.com/a/1",
        "│    └─── https://example.com/a/2",
        "│         └─── https://example.com/a/2/x",
        "└─── https://example.com/b",
    ]
    assert str(sample_sitemap) == sample_sitemap.render()


def test_render_single_page():
    sitemap = Sitemap()
    sitemap.add_root(Page.new("https://example.com", PageKind.INTERNAL))
    assert sitemap.render() == "https://example.com\n"


def test_print_frames_with_blank_lines(sample_sitemap, capsys):
    sample_sitemap.print()
    out = capsys.readouterr().out
    assert out.startswith("\nhttps://example.com\n")
    assert out.endswith("https://example.com/b\n\n")


def test_urls_are_unique_in_preorder():
    sitemap = Sitemap()
    root = sitemap.add_root(Page.new("https://example.com", PageKind.INTERNAL))
    a = sitemap.add_child(root, Page.new("https://example.com/x", PageKind.INTERNAL))
    b = sitemap.add_child(root, Page.new("https://example.com/b", PageKind.INTERNAL))
    sitemap.add_child(b, Page.new("https://example.com/x", PageKind.INTERNAL))
    sitemap.add_child(a, Page.new("https://other.com", PageKind.EXTERNAL))
    assert sitemap.size == 5
    assert sitemap.urls() == [
        "https://example.com",
        "https://example.com/x",
        "https://other.com",
        "https://example.com/b",
    ]


def test_xml_export_writes_each_url_once(tmp_path):
    sitemap = Sitemap()
    root = sitemap.add_root(Page.new("https://example.com", PageKind.INTERNAL))
    sitemap.add_child(root, Page.new("https://example.com/x", PageKind.INTERNAL))
    b = sitemap.add_child(root, Page.new("https://example.com/b", PageKind.INTERNAL))
    sitemap.add_child(b, Page.new("https://example.com/x", PageKind.INTERNAL))

    path = sitemap.to_xml(tmp_path / "out" / "nested")

    assert path == tmp_path / "out" / "nested" / "sitemap.xml"
    text = path.read_text(encoding="utf-8")
    assert text.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<urlset xmlns="')
    assert f'xmlns="{SITEMAP_NS}"' in text
    assert text.count("<url>") == 3
    assert text.count("<loc>https://example.com/x</loc>") == 1
    assert read_sitemap_xml(path) == [
        "https://example.com",
        "https://example.com/x",
        "https://example.com/b",
    ]


def test_xml_escapes_urls(tmp_path):
    sitemap = Sitemap()
    sitemap.add_root(Page.new("https://example.com/?a=1&b=2", PageKind.INTERNAL))
    text = sitemap.to_xml(tmp_path).read_text(encoding="utf-8")
    assert "<loc>https://example.com/?a=1&amp;b=2</loc>" in text


def test_xml_export_fails_when_directory_is_a_file(tmp_path, sample_sitemap):
    blocker = tmp_path / "file.txt"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(OutputError):
        sample_sitemap.to_xml(blocker)


def test_parse_sitemap_recovers_from_broken_xml():
    content = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<urlset xmlns="{SITEMAP_NS}"><url><loc> https://example.com/a </loc></url>'
        "<url><loc>https://example.com/b</loc>"
    )
    assert parse_sitemap(content) == ["https://example.com/a", "https://example.com/b"]


def test_root_page_of_empty_sitemap():
    with pytest.raises(LookupError):
        Sitemap().root_page


def test_xml_export_with_debug_logging(sample_sitemap, tmp_path, debug_logging):
    path = sample_sitemap.to_xml(tmp_path)
    assert read_sitemap_xml(path)[0] == "https://example.com"


def test_xml_write_failure_raises_output_error(sample_sitemap, tmp_path):
    (tmp_path / "sitemap.xml").mkdir()
    with pytest.raises(OutputError):
        sample_sitemap.to_xml(tmp_path)
