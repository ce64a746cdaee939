"""Tests for docsearch.page_tables — fallback resolution and heuristic paging."""
from __future__ import annotations

from docsearch.layout_types import PageRef
from docsearch.page_layout import build_layout
from docsearch.page_tables import (
    extract_snippet,
    find_in_page_table,
    resolve_page,
    split_into_pages,
)


def _stale_table() -> tuple[PageRef, ...]:
    """Three pages with gaps between them (boundaries from another process)."""
    return (
        PageRef(1, "alpha beta", 0, 10),
        PageRef(2, "gamma delta", 20, 30),
        PageRef(3, "target words", 40, 50),
    )


# ── resolve_page ─────────────────────────────────────────────────────


class TestResolvePage:
    def test_containment(self) -> None:
        res = resolve_page(25, "anything", _stale_table())
        assert (res.page_number, res.method) == (2, "containment")

    def test_containment_boundaries_inclusive(self) -> None:
        assert resolve_page(10, "x", _stale_table()).page_number == 1
        assert resolve_page(40, "x", _stale_table()).page_number == 3

    def test_content_scan_beats_nearest(self) -> None:
        # Offset 15 sits in a gap, nearest would be page 1 (distance 5);
        # the query text only occurs in page 3's content.
        res = resolve_page(15, "target", _stale_table())
        assert (res.page_number, res.method) == (3, "content_scan")
        assert res.page == _stale_table()[2]

    def test_content_scan_ignores_case_by_default(self) -> None:
        assert resolve_page(15, "TARGET", _stale_table()).method == "content_scan"
        res = resolve_page(15, "TARGET", _stale_table(), match_case=True)
        assert res.method == "nearest"

    def test_nearest_tie_keeps_first(self) -> None:
        # Offset 35: page 2 end and page 3 start are both 5 away.
        res = resolve_page(35, "missing", _stale_table())
        assert (res.page_number, res.method, res.distance) == (2, "nearest", 5)

    def test_nearest_past_the_end(self) -> None:
        res = resolve_page(500, "missing", _stale_table())
        assert (res.page_number, res.distance) == (3, 450)

    def test_empty_table_is_page_one(self) -> None:
        res = resolve_page(123, "x", ())
        assert (res.page_number, res.method, res.page) == (1, "single_page", None)

    def test_single_page_table(self) -> None:
        only = PageRef(7, "content", 100, 107)
        res = resolve_page(0, "x", (only,))
        assert (res.page_number, res.method) == (7, "single_page")

    def test_synthesized_pages_as_table(self) -> None:
        text = "\n".join(f"row {i}" for i in range(75))
        layout = build_layout(text)
        table = tuple(p.to_ref() for p in layout.pages)
        offset = text.index("row 60")
        assert resolve_page(offset, "row 60", table).page_number == 2


# ── find_in_page_table ───────────────────────────────────────────────


class TestFindInPageTable:
    def test_without_pages(self) -> None:
        text = "line one\nline two has Target\nline three"
        hit = find_in_page_table(text, "target")
        assert hit is not None
        assert hit.page_number == 1
        assert hit.line_number == 2
        assert hit.position == text.index("Target")
        assert hit.method == "single_page"
        assert hit.snippet == text

    def test_match_case_miss(self) -> None:
        assert find_in_page_table("only lower target", "Target", match_case=True) is None

    def test_blank_or_absent(self) -> None:
        assert find_in_page_table("some text", "  ") is None
        assert find_in_page_table("", "x") is None
        assert find_in_page_table("some text", "absent") is None

    def test_snippet_from_page_content_on_containment(self) -> None:
        text = "first page words\nsecond page needle here"
        pages = (
            PageRef(1, "first page words", 0, 16),
            PageRef(2, "second page needle here", 17, 40),
        )
        hit = find_in_page_table(text, "needle", pages)
        assert hit is not None
        assert (hit.page_number, hit.method) == (2, "containment")
        assert hit.snippet == "second page needle here"

    def test_stale_table_uses_content_scan(self) -> None:
        text = "x" * 15 + "target"
        hit = find_in_page_table(text, "target", _stale_table())
        assert hit is not None
        assert (hit.page_number, hit.method) == (3, "content_scan")
        assert hit.snippet == "target words"


class TestExtractSnippet:
    def test_ellipses_mark_clipped_sides(self) -> None:
        text = "a" * 200 + "needle" + "b" * 200
        snippet = extract_snippet(text, 200, 6)
        assert snippet.startswith("...a")
        assert snippet.endswith("b...")
        assert len(snippet) == 3 + 100 + 6 + 100 + 3

    def test_no_ellipses_when_whole_text_fits(self) -> None:
        assert extract_snippet("  short needle text ", 8, 6) == "short needle text"


# ── split_into_pages ─────────────────────────────────────────────────


class TestSplitIntoPages:
    def test_form_feeds(self) -> None:
        text = "first page text\fsecond page text"
        pages = split_into_pages(text)
        assert [p.page_number for p in pages] == [1, 2]
        assert [p.content for p in pages] == ["first page text", "second page text"]
        for p in pages:
            assert text[p.start_index:p.end_index] == p.content

    def test_blank_form_feed_pages_keep_numbering(self) -> None:
        pages = split_into_pages("a\f  \fc")
        assert [(p.page_number, p.content) for p in pages] == [(1, "a"), (3, "c")]

    def test_blank_line_runs(self) -> None:
        text = "A" * 150 + "\n\n\n\n" + "B" * 150
        pages = split_into_pages(text)
        assert [p.content for p in pages] == ["A" * 150, "B" * 150]
        assert (pages[1].start_index, pages[1].end_index) == (154, len(text))

    def test_page_footer_lines(self) -> None:
        body = "word " * 40
        text = f"{body}\nPage 1\n{body}\nPage 2\n{body}"
        pages = split_into_pages(text)
        assert len(pages) == 3
        assert all("Page" not in p.content for p in pages)

    def test_short_segments_skipped(self) -> None:
        text = "tiny\n\n\n\n" + "C" * 150 + "\n\n\n\n" + "D" * 150
        pages = split_into_pages(text)
        assert [p.content[0] for p in pages] == ["C", "D"]
        assert [p.page_number for p in pages] == [1, 2]

    def test_paragraph_distribution(self) -> None:
        paragraph = ("word " * 60).strip()
        text = "\n\n".join([paragraph] * 10)
        pages = split_into_pages(text)
        assert len(pages) == 2
        assert pages[0].content == "\n\n".join([paragraph] * 5)

    def test_doc_files_use_smaller_pages(self) -> None:
        paragraph = ("word " * 60).strip()
        text = "\n\n".join([paragraph] * 10)
        assert len(split_into_pages(text, is_doc_file=True)) == 2
        text = "\n\n".join([paragraph] * 14)
        assert len(split_into_pages(text)) == 2
        assert len(split_into_pages(text, is_doc_file=True)) == 3

    def test_single_page_fallback(self) -> None:
        pages = split_into_pages("tiny")
        assert pages == (PageRef(1, "tiny", 0, 4),)
