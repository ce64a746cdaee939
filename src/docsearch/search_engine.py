"""Match locator over a synthesized DocumentLayout.

Scans the full text once with the compiled query and attributes every
occurrence to a page, a 1-based line and the most specific enclosing
section, with a fixed context window on each side.

Stateless: each call allocates and returns a fresh match list, so searches
can run concurrently against one shared layout.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Sequence

from docsearch.layout_types import (
    DEFAULT_CONFIG,
    DocumentLayout,
    Err,
    LayoutConfig,
    Match,
    Page,
    SearchOptions,
    Section,
)
from docsearch.query_compiler import compile_query

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Attribution helpers
# ---------------------------------------------------------------------------


def find_page_for_offset(pages: Sequence[Page], offset: int) -> Page | None:
    """First page whose [start_index, end_index] contains *offset*."""
    for page in pages:
        if page.contains(offset):
            return page
    return None


def find_section_for_offset(
    sections: Sequence[Section],
    offset: int,
) -> Section | None:
    """Most specific section containing *offset*.

    The highest level wins (level 3 is nested deeper than level 1); ties
    go to the section detected first.
    """
    best: Section | None = None
    for section in sections:
        if section.contains(offset) and (best is None or section.level > best.level):
            best = section
    return best


def line_number_at(text: str, offset: int) -> int:
    """1-based line number of *offset* in *text*."""
    return text.count("\n", 0, offset) + 1


def iter_pattern_spans(pattern: re.Pattern[str], text: str) -> Iterator[re.Match[str]]:
    """Yield non-overlapping matches left to right.

    Each scan resumes at the previous match end; after a zero-length match
    the position is forced forward by one so the scan always terminates.
    """
    pos = 0
    while pos <= len(text):
        m = pattern.search(text, pos)
        if m is None:
            return
        yield m
        pos = m.end() + 1 if m.end() == m.start() else m.end()


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


def search_document(
    layout: DocumentLayout,
    query: str,
    options: SearchOptions,
    config: LayoutConfig | None = None,
) -> list[Match]:
    """Find every occurrence of *query* in *layout*.

    Args:
        layout: Layout built by ``build_layout``.
        query: User query (literal, wildcard or regex per *options*).
        options: Search flags.
        config: Supplies the context window width. Defaults to 100 chars.

    Returns:
        Matches in ascending text order, or descending when
        ``options.search_backwards`` is set. Empty for a blank query or a
        malformed pattern.
    """
    if not query.strip():
        return []

    compiled = compile_query(query, options)
    if isinstance(compiled, Err):
        err = compiled.error
        log.warning(
            "Invalid search pattern %r (%s): %s", err.query, err.pattern, err.reason,
        )
        return []
    pattern = compiled.value

    cfg = config or DEFAULT_CONFIG
    text = layout.text
    window = cfg.context_chars
    matches: list[Match] = []

    # Newlines are counted incrementally; occurrences arrive in ascending order.
    line_number = 1
    counted_to = 0

    for m in iter_pattern_spans(pattern, text):
        start, end = m.start(), m.end()
        line_number += text.count("\n", counted_to, start)
        counted_to = start

        page = find_page_for_offset(layout.pages, start)
        if page is None:
            log.debug("Dropping match at %d: no page contains it", start)
            continue

        section = find_section_for_offset(layout.sections, start)
        ctx_start = max(0, start - window)
        ctx_end = min(len(text), end + window)
        matches.append(Match(
            text=m.group(0),
            start_index=start,
            end_index=end,
            page_number=page.page_number,
            line_number=line_number,
            section_title=section.title if section is not None else None,
            context=text[ctx_start:ctx_end],
            before_context=text[ctx_start:start],
            after_context=text[end:ctx_end],
        ))

    if options.search_backwards:
        matches.reverse()
    return matches


def count_matches(layout: DocumentLayout, query: str, options: SearchOptions) -> int:
    """Number of attributable matches (the search bar's "N results")."""
    return len(search_document(layout, query, options))
