"""Tests for docsearch.html_utils."""
from __future__ import annotations

from pathlib import Path

from docsearch.html_utils import extract_html_headings, read_file, strip_html


class TestExtractHtmlHeadings:
    def test_levels_in_document_order(self) -> None:
        html = "<h1>Report</h1><p>x</p><h3>Detail</h3><h2>Summary</h2>"
        assert extract_html_headings(html) == [
            (1, "Report"), (3, "Detail"), (2, "Summary"),
        ]

    def test_inner_markup_stripped(self) -> None:
        html = '<h2 class="x">Scope <em>and</em> <b>Terms</b></h2>'
        assert extract_html_headings(html) == [(2, "Scope and Terms")]

    def test_entities_decoded(self) -> None:
        assert extract_html_headings("<h1>Q&amp;A</h1>") == [(1, "Q&A")]

    def test_empty_headings_skipped(self) -> None:
        assert extract_html_headings("<h1>  </h1><h2><br/></h2>") == []

    def test_empty_hint(self) -> None:
        assert extract_html_headings("") == []

    def test_no_headings(self) -> None:
        assert extract_html_headings("<p>just a paragraph</p>") == []


class TestStripHtml:
    def test_block_elements_become_lines(self) -> None:
        text = strip_html("<h1>Title</h1><p>First para.</p><p>Second para.</p>")
        assert text.split("\n") == ["Title", "First para.", "Second para."]

    def test_zero_width_removed(self) -> None:
        assert strip_html("<p>a\u200bb</p>") == "ab"

    def test_empty(self) -> None:
        assert strip_html("") == ""


class TestReadFile:
    def test_utf8(self, tmp_path: Path) -> None:
        p = tmp_path / "a.txt"
        p.write_text("café", encoding="utf-8")
        assert read_file(p) == "café"

    def test_cp1252_fallback(self, tmp_path: Path) -> None:
        p = tmp_path / "smart.txt"
        p.write_bytes(b"\x93quoted\x94")
        assert read_file(p) == "\u201cquoted\u201d"

    def test_missing_file(self, tmp_path: Path) -> None:
        assert read_file(tmp_path / "nope.txt") == ""

    def test_min_size(self, tmp_path: Path) -> None:
        p = tmp_path / "small.txt"
        p.write_text("abc")
        assert read_file(p, min_size=10) == ""
