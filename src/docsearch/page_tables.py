"""Page tables computed outside the synthesizer, and offset -> page resolution.

Upstream paginators (per-format converters, server-side chunkers) produce
their own page tables. Their boundaries are not guaranteed to agree with the
text a search runs over, so resolving a match offset to a page uses a
three-tier fallback chain instead of failing:

    1. Containment   — the page whose [start_index, end_index] holds the offset.
    2. Content scan  — the first page whose stored content contains the query.
    3. Nearest       — the page closest to the offset by either boundary.

``split_into_pages`` is the heuristic paginator used for documents whose
converter gives no page table at all.
"""
from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence

from docsearch.layout_types import PageRef, PageResolution, TextHit
from docsearch.search_engine import line_number_at

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Offset -> page resolution
# ---------------------------------------------------------------------------


def resolve_page(
    offset: int,
    query: str,
    pages: Sequence[PageRef],
    *,
    match_case: bool = False,
) -> PageResolution:
    """Attribute *offset* (an occurrence of *query*) to a page.

    Never fails: an empty or single-page table resolves to that page
    (page 1 when the table is empty).

    Args:
        offset: Position of the occurrence in the full text.
        query: The literal query that produced the occurrence.
        pages: Page table, in page order.
        match_case: If False, the content scan ignores case.

    Returns:
        PageResolution naming the page and the tier that found it.
    """
    if not pages:
        return PageResolution(page_number=1, method="single_page")
    if len(pages) == 1:
        return PageResolution(
            page_number=pages[0].page_number, method="single_page", page=pages[0],
        )

    for page in pages:
        if page.start_index <= offset <= page.end_index:
            return PageResolution(
                page_number=page.page_number, method="containment", page=page,
            )

    needle = query if match_case else query.lower()
    if needle:
        for page in pages:
            haystack = page.content if match_case else page.content.lower()
            if needle in haystack:
                log.debug(
                    "Offset %d outside page table; found %r in page %d content",
                    offset, query, page.page_number,
                )
                return PageResolution(
                    page_number=page.page_number, method="content_scan", page=page,
                )

    closest = pages[0]
    closest_distance = abs(offset - closest.start_index)
    for page in pages:
        distance = min(abs(offset - page.start_index), abs(offset - page.end_index))
        if distance < closest_distance:
            closest = page
            closest_distance = distance
    log.debug(
        "Offset %d resolved to nearest page %d (distance %d)",
        offset, closest.page_number, closest_distance,
    )
    return PageResolution(
        page_number=closest.page_number,
        method="nearest",
        distance=closest_distance,
        page=closest,
    )


# ---------------------------------------------------------------------------
# First-occurrence search against a page table
# ---------------------------------------------------------------------------


def extract_snippet(
    text: str,
    position: int,
    length: int,
    context_chars: int = 100,
) -> str:
    """Trimmed window around ``text[position:position + length]``.

    ``...`` marks each side where the window was clipped.
    """
    start = max(0, position - context_chars)
    end = min(len(text), position + length + context_chars)
    snippet = text[start:end].strip()
    if start > 0:
        snippet = "..." + snippet
    if end < len(text):
        snippet = snippet + "..."
    return snippet


def find_in_page_table(
    text: str,
    query: str,
    pages: Sequence[PageRef] | None = None,
    *,
    match_case: bool = False,
    context_chars: int = 100,
) -> TextHit | None:
    """Locate the first literal occurrence of *query* and attribute a page.

    The snippet comes from the page's own content when the page was found
    by containment or content scan, and from the full text otherwise.

    Returns:
        TextHit, or None for a blank query, empty text, or no occurrence.
    """
    if not text or not query.strip():
        return None

    needle = query if match_case else query.lower()
    haystack = text if match_case else text.lower()
    position = haystack.find(needle)
    if position < 0:
        return None

    resolution = resolve_page(position, query, pages or (), match_case=match_case)
    page = resolution.page

    snippet_source = text
    snippet_pos = position
    if page is not None and resolution.method == "containment":
        snippet_source = page.content
        snippet_pos = position - page.start_index
    elif page is not None and resolution.method == "content_scan":
        snippet_source = page.content
        page_haystack = page.content if match_case else page.content.lower()
        snippet_pos = page_haystack.find(needle)

    return TextHit(
        page_number=resolution.page_number,
        line_number=line_number_at(text, position),
        position=position,
        snippet=extract_snippet(snippet_source, snippet_pos, len(query), context_chars),
        method=resolution.method,
    )


# ---------------------------------------------------------------------------
# Heuristic paginator
# ---------------------------------------------------------------------------

# Tried in order; the first that yields more than one page wins.
_BREAK_PATTERNS: list[re.Pattern[str]] = [
    # 3+ blank lines
    re.compile(r"\n\s*\n\s*\n\s*\n"),
    # Rule lines: "-----" / "====="
    re.compile(r"\n\s*[-=]{3,}\s*\n"),
    # "Page 12" footer lines
    re.compile(r"\n\s*Page\s+\d+\s*\n", re.IGNORECASE),
    # Bare page numbers followed by a blank line
    re.compile(r"\n\s*\d+\s*\n\s*\n"),
]

_PARAGRAPH_RE = re.compile(r"\n\s*\n")

_CHARS_PER_DOC_PAGE = 1800
_CHARS_PER_TEXT_PAGE = 2500


def _pages_from_form_feeds(text: str) -> list[PageRef]:
    pages: list[PageRef] = []
    offset = 0
    for index, part in enumerate(text.split("\f")):
        content = part.strip()
        if content:
            start = offset + part.index(content)
            pages.append(PageRef(
                page_number=index + 1,
                content=content,
                start_index=start,
                end_index=start + len(content),
            ))
        offset += len(part) + 1
    return pages


def _pages_from_pattern(
    text: str,
    pattern: re.Pattern[str],
    min_page_chars: int,
    min_last_page_chars: int,
) -> list[PageRef]:
    pages: list[PageRef] = []
    last = 0
    for m in pattern.finditer(text):
        content = text[last:m.start()].strip()
        if len(content) > min_page_chars:
            pages.append(PageRef(
                page_number=len(pages) + 1,
                content=content,
                start_index=last,
                end_index=m.start(),
            ))
        last = m.end()

    tail = text[last:].strip()
    if len(tail) > min_last_page_chars:
        pages.append(PageRef(
            page_number=len(pages) + 1,
            content=tail,
            start_index=last,
            end_index=len(text),
        ))
    return pages


def _pages_from_paragraphs(text: str, is_doc_file: bool) -> list[PageRef]:
    """Spread paragraphs evenly over an estimated page count.

    Offsets assume paragraphs are separated by exactly one blank line, so
    they drift on irregular spacing; resolve_page tolerates that.
    """
    paragraphs = [p for p in _PARAGRAPH_RE.split(text) if p.strip()]
    if len(paragraphs) <= 1:
        return []

    chars_per_page = _CHARS_PER_DOC_PAGE if is_doc_file else _CHARS_PER_TEXT_PAGE
    estimated = max(1, math.ceil(len(text) / chars_per_page))
    if estimated <= 1:
        return []

    per_page = math.ceil(len(paragraphs) / estimated)
    pages: list[PageRef] = []
    offset = 0
    for page_number in range(1, estimated + 1):
        chunk = paragraphs[(page_number - 1) * per_page:page_number * per_page]
        content = "\n\n".join(chunk)
        if not content.strip():
            continue
        pages.append(PageRef(
            page_number=page_number,
            content=content,
            start_index=offset,
            end_index=offset + len(content),
        ))
        offset += len(content) + 2
    return pages


def split_into_pages(
    text: str,
    *,
    is_doc_file: bool = False,
    min_page_chars: int = 100,
    min_last_page_chars: int = 50,
) -> tuple[PageRef, ...]:
    """Split extracted text into a page table using layout heuristics.

    Strategy order:
    1. Form feed characters (real page breaks from the converter).
    2. Textual break patterns (blank-line runs, rule lines, "Page N"
       footers, bare page numbers).
    3. Paragraph distribution over an estimated page count (1800 chars per
       page for legacy .doc extractions, 2500 otherwise).
    4. A single page covering the whole text.

    Args:
        text: Extracted text.
        is_doc_file: True for legacy binary word-processor extractions.
        min_page_chars: Segments at or below this length (trimmed) are
            skipped by the break-pattern strategy.
        min_last_page_chars: The trailing segment is kept only when longer.

    Returns:
        Page table in page order; never empty.
    """
    if "\f" in text:
        pages = _pages_from_form_feeds(text)
        if pages:
            log.debug("Split into %d pages using form feeds", len(pages))
            return tuple(pages)

    for pattern in _BREAK_PATTERNS:
        pages = _pages_from_pattern(text, pattern, min_page_chars, min_last_page_chars)
        if len(pages) > 1:
            log.debug(
                "Split into %d pages using break pattern %r", len(pages), pattern.pattern,
            )
            return tuple(pages)

    pages = _pages_from_paragraphs(text, is_doc_file)
    if len(pages) > 1:
        log.debug("Split into %d pages using paragraph distribution", len(pages))
        return tuple(pages)

    log.debug("Using a single page for %d chars", len(text))
    return (PageRef(page_number=1, content=text, start_index=0, end_index=len(text)),)
