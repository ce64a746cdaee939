"""Synthetic pagination for documents without a native page concept.

Lines are packed into pages under a line budget and a character budget
(LayoutConfig.lines_per_page / chars_per_page). Form feed characters force a
page break mid-line. Pages are a navigation aid, not a rendering of the
original pagination.

Offsets: ``end_index`` is the offset just past the page's last line (the
newline that ends the page, or ``len(text)``), and every page starts at the
previous page's ``end_index + 1``, so ``[0, len(text)]`` is covered with no
gaps. Usually ``text[start_index:end_index] == content``; a page that follows
a form feed at the end of a line also covers that line's newline, so its
``start_index`` points at the newline just before its content.
"""
from __future__ import annotations

import logging
from dataclasses import replace

from docsearch.layout_types import (
    DEFAULT_CONFIG,
    DocumentLayout,
    LayoutConfig,
    Page,
    Section,
)
from docsearch.section_detector import detect_sections
from docsearch.text_normalize import count_words, normalize_text

log = logging.getLogger(__name__)

PAGE_BREAK = "\f"


def sections_for_page(
    sections: tuple[Section, ...] | list[Section],
    page_start: int,
    page_end: int,
) -> tuple[Section, ...]:
    """Sections whose span intersects ``[page_start, page_end]``.

    A section attaches when it starts inside the page, ends inside the page,
    or spans the whole page, so a long section can attach to several
    consecutive pages.
    """
    return tuple(
        s for s in sections
        if page_start <= s.start_index <= page_end
        or page_start <= s.end_index <= page_end
        or (s.start_index <= page_start and s.end_index >= page_end)
    )


class _PageBuffer:
    """Accumulates lines for the page being built."""

    __slots__ = ("lines", "chars", "start", "end", "pending_start")

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.chars = 0          # len("\n".join(lines))
        self.start = 0
        self.end = 0            # Offset just past the last appended line
        # Set after a break marker that ends its line; the next page
        # starts here so the line's newline stays covered.
        self.pending_start: int | None = None

    def append(self, line: str, offset: int) -> None:
        if not self.lines:
            self.start = offset if self.pending_start is None else self.pending_start
            self.pending_start = None
            self.chars = len(line)
        else:
            self.chars += len(line) + 1
        self.lines.append(line)
        self.end = offset + len(line)

    def would_overflow(self, line: str, config: LayoutConfig) -> bool:
        if not self.lines:
            return False
        return (
            len(self.lines) >= config.lines_per_page
            or self.chars + len(line) + 1 > config.chars_per_page
        )


def synthesize_pages(
    text: str,
    sections: tuple[Section, ...] | list[Section],
    config: LayoutConfig | None = None,
) -> tuple[Page, ...]:
    """Group the lines of *text* into budget-bounded pages.

    Args:
        text: Normalized document text.
        sections: Detected sections, attached to the pages they intersect.
        config: Page budgets. Defaults to 50 lines / 4000 chars.

    Returns:
        Pages numbered from 1 with no gaps. Empty text yields a single
        empty page spanning [0, 0].
    """
    cfg = config or DEFAULT_CONFIG
    pages: list[Page] = []
    buf = _PageBuffer()

    def flush() -> None:
        content = "\n".join(buf.lines)
        end = buf.end
        pages.append(Page(
            page_number=len(pages) + 1,
            content=content,
            start_index=buf.start,
            end_index=end,
            sections=sections_for_page(sections, buf.start, end),
            line_count=len(buf.lines),
        ))
        buf.lines = []
        buf.chars = 0

    cursor = 0
    for line in text.split("\n"):
        line_start = cursor
        cursor += len(line) + 1

        if buf.would_overflow(line, cfg):
            flush()

        if PAGE_BREAK not in line:
            buf.append(line, line_start)
            continue

        # Everything before each marker closes the current page.
        piece_start = line_start
        rest = line
        while PAGE_BREAK in rest:
            before, rest = rest.split(PAGE_BREAK, 1)
            buf.append(before, piece_start)
            flush()
            piece_start += len(before) + 1
        if rest:
            buf.append(rest, piece_start)
        else:
            buf.pending_start = piece_start

    if buf.lines:
        flush()
    elif buf.pending_start is not None:
        # Text ended on a break marker; the last page takes the tail.
        pages[-1] = replace(pages[-1], end_index=len(text))

    return tuple(pages)


def build_layout(
    text: str,
    html_hint: str | None = None,
    config: LayoutConfig | None = None,
) -> DocumentLayout:
    """Normalize *text* and synthesize its section outline and pages.

    Args:
        text: Extracted document text (any line-ending convention).
        html_hint: Optional HTML rendering used to find headings.
        config: Budgets and detector rules. Defaults to LayoutConfig().

    Returns:
        Immutable DocumentLayout over the normalized text.
    """
    cfg = config or DEFAULT_CONFIG
    normalized = normalize_text(text)
    sections = detect_sections(
        normalized,
        html_hint,
        rules=cfg.section_rules,
        dedupe=cfg.dedupe_sections,
    )
    pages = synthesize_pages(normalized, sections, cfg)
    layout = DocumentLayout(
        text=normalized,
        sections=sections,
        pages=pages,
        total_pages=len(pages),
        word_count=count_words(normalized),
        character_count=len(normalized),
    )
    log.debug(
        "Built layout: %d chars, %d words, %d sections, %d pages",
        layout.character_count, layout.word_count,
        len(layout.sections), layout.total_pages,
    )
    return layout
