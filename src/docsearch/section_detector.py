"""Section detector for flat extracted text.

Builds a heading outline for documents that lost their structure during
extraction (plain text, word-processor raw text, OCR output).

2-pass approach:
    1. HTML hint pass: h1-h6 titles from the converter's HTML rendering,
       anchored at their first case-insensitive occurrence in the text.
    2. Pattern pass: line-by-line heading patterns (Chapter/Section/Part,
       dotted numbers, ALL CAPS lines, underlined lines).

Results from both passes are merged and stably sorted by start offset.
Detection never fails; text without headings yields an empty tuple.
"""
from __future__ import annotations

import re

from docsearch.html_utils import extract_html_headings
from docsearch.layout_types import Section, SectionRules


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# "Chapter 3: Results", "SECTION 2 - Scope", "Part 4 Appendix"
_LABELED_RE = re.compile(
    r"^(?:Chapter|Section|Part)\s+\d+[:\-\s](.+)$",
    re.IGNORECASE,
)

# "2.1.3 Title", "1. Introduction", "4 Methods"
_NUMBERED_RE = re.compile(r"^(\d+(?:\.\d+)*\.?)\s+(.+)$")

# "TERMS AND CONDITIONS": letters and whitespace only, 3+ chars.
_ALL_CAPS_RE = re.compile(r"^[A-Z][A-Z\s]{2,}$")

# Markdown-style underline: "=====" or "-----" under a heading line.
_UNDERLINE_RE = re.compile(r"^[=-]{3,}$")

_MAX_UNDERLINED_TITLE = 50
_MAX_LEVEL = 6

# Short all-caps rule ("basic" rules only): 6-59 chars, followed by content.
_SHORT_CAPS_MIN = 6
_SHORT_CAPS_MAX = 59


# ---------------------------------------------------------------------------
# Pass 1: HTML hint
# ---------------------------------------------------------------------------


def _sections_from_html(text: str, html_hint: str) -> list[Section]:
    """Anchor HTML heading titles into the plain text.

    Only the first occurrence of each title is used; titles that do not
    occur in *text* are dropped rather than invented.
    """
    text_lower = text.lower()
    sections: list[Section] = []
    for level, title in extract_html_headings(html_hint):
        pos = text_lower.find(title.lower())
        if pos < 0:
            continue
        sections.append(Section(
            level=level,
            title=title,
            start_index=pos,
            end_index=pos + len(title),
        ))
    return sections


# ---------------------------------------------------------------------------
# Pass 2: line patterns
# ---------------------------------------------------------------------------


def _match_heading(line: str, next_line: str | None) -> tuple[int, str] | None:
    """Return (level, title) for the first heading pattern *line* matches."""
    m = _LABELED_RE.match(line)
    if m:
        # Only the one separator char is consumed: "Section 4 - Scope"
        # keeps "- Scope" as its title.
        return 1, m.group(1).strip()

    m = _NUMBERED_RE.match(line)
    if m:
        level = min(m.group(1).count(".") + 1, _MAX_LEVEL)
        return level, m.group(2).strip()

    if _ALL_CAPS_RE.match(line):
        return 1, line

    if (
        next_line is not None
        and len(line) <= _MAX_UNDERLINED_TITLE
        and _UNDERLINE_RE.match(next_line)
    ):
        return 2, line

    return None


def _is_short_caps_heading(line: str, next_line: str | None) -> bool:
    """Short, entirely upper-case line immediately followed by content."""
    return (
        _SHORT_CAPS_MIN <= len(line) <= _SHORT_CAPS_MAX
        and line.isupper()
        and bool(next_line)
    )


def _sections_from_lines(text: str, rules: SectionRules) -> list[Section]:
    lines = text.split("\n")
    stripped = [line.strip() for line in lines]
    sections: list[Section] = []

    cursor = 0
    for i, line in enumerate(stripped):
        line_start = cursor
        cursor += len(lines[i]) + 1
        if not line:
            continue

        next_line = stripped[i + 1] if i + 1 < len(stripped) else None
        hit = _match_heading(line, next_line)
        if hit is not None:
            level, title = hit
            sections.append(Section(
                level=level,
                title=title,
                start_index=line_start,
                end_index=line_start + len(line),
            ))

        # Evaluated independently of the patterns above, so one line can
        # yield two sections.
        if rules == "basic" and _is_short_caps_heading(line, next_line):
            sections.append(Section(
                level=2,
                title=line,
                start_index=line_start,
                end_index=line_start + len(line),
            ))

    return sections


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def dedupe_sections(sections: list[Section]) -> list[Section]:
    """Drop sections whose (start_index, end_index) span was already seen."""
    seen: set[tuple[int, int]] = set()
    unique: list[Section] = []
    for section in sections:
        key = (section.start_index, section.end_index)
        if key in seen:
            continue
        seen.add(key)
        unique.append(section)
    return unique


def detect_sections(
    text: str,
    html_hint: str | None = None,
    *,
    rules: SectionRules = "basic",
    dedupe: bool = False,
) -> tuple[Section, ...]:
    """Detect headings in normalized text.

    Args:
        text: Normalized document text.
        html_hint: Optional HTML rendering of the same document.
        rules: "basic" adds the short all-caps heading rule on top of the
            "advanced" pattern set.
        dedupe: If True, keep only the first section per span.

    Returns:
        Sections sorted by start_index; ties keep detection order
        (HTML headings first, then line patterns).
    """
    if not text:
        return ()

    sections: list[Section] = []
    if html_hint:
        sections.extend(_sections_from_html(text, html_hint))
    sections.extend(_sections_from_lines(text, rules))

    sections.sort(key=lambda s: s.start_index)
    if dedupe:
        sections = dedupe_sections(sections)
    return tuple(sections)
