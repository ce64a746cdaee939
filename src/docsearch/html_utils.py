"""HTML structural hints and encoding-safe file reading.

Upstream converters (e.g. word-processor -> HTML) hand the core an HTML
rendering next to the plain text. The markup is only used as a hint: heading
tags give reliable section titles, which the section detector then anchors
back into the plain text.

Provides:
- ``extract_html_headings`` — (level, title) pairs for h1-h6 in document order.
- ``strip_html`` — plain text from HTML for callers that only have markup.
- ``read_file`` — text file reading with UTF-8 -> CP1252 -> replace fallback.
"""
from __future__ import annotations

import re
from pathlib import Path

from bs4 import BeautifulSoup
from bs4.element import Tag

# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------

_HEADING_TAGS: list[str] = ["h1", "h2", "h3", "h4", "h5", "h6"]

# Elements that start a new line when markup is flattened to text.
_BLOCK_TAGS: list[str] = [*_HEADING_TAGS, "p", "div", "li", "br", "tr", "table"]


# ---------------------------------------------------------------------------
# Heading extraction
# ---------------------------------------------------------------------------


def extract_html_headings(html_hint: str) -> list[tuple[int, str]]:
    """Collect heading elements from an HTML hint.

    Inner markup is stripped and whitespace runs are collapsed, so
    ``<h2>Scope <em>and</em> Terms</h2>`` yields ``(2, "Scope and Terms")``.
    Headings with no text are skipped.

    Args:
        html_hint: HTML rendering of the document.

    Returns:
        (level, title) pairs in document order. Empty list if *html_hint*
        is empty.
    """
    if not html_hint:
        return []

    soup = BeautifulSoup(html_hint, "html.parser")
    headings: list[tuple[int, str]] = []
    for tag in soup.find_all(_HEADING_TAGS):
        if not isinstance(tag, Tag):
            continue
        title = re.sub(r"\s+", " ", tag.get_text()).strip()
        if not title:
            continue
        headings.append((int(tag.name[1]), title))
    return headings


# ---------------------------------------------------------------------------
# Plain text from markup
# ---------------------------------------------------------------------------

_HSPACE_RE = re.compile(r"[^\S\n]+")
_BLANK_RUN_RE = re.compile(r"\n{3,}")

# U+200B (ZWSP), U+200C (ZWNJ), U+FEFF (BOM): invisible characters from
# HTML/Word conversions that silently break pattern matching.
_ZERO_WIDTH_RE = re.compile("[\u200b\u200c\ufeff]")


def strip_html(raw_html: str) -> str:
    """Render *raw_html* as plain text, one line per block element.

    Horizontal whitespace collapses to single spaces, each line is trimmed,
    and runs of blank lines shrink to one. Returns "" for empty input.
    """
    if not raw_html:
        return ""

    soup = BeautifulSoup(raw_html, "html.parser")
    for block in soup.find_all(_BLOCK_TAGS):
        block.insert_before("\n")

    flat = _HSPACE_RE.sub(" ", soup.get_text(separator=" "))
    lines = [line.strip() for line in flat.split("\n")]
    text = _BLANK_RUN_RE.sub("\n\n", "\n".join(lines)).strip()
    return strip_zero_width(text)


def strip_zero_width(text: str) -> str:
    """Drop ZWSP, ZWNJ and BOM characters."""
    return _ZERO_WIDTH_RE.sub("", text)


# ---------------------------------------------------------------------------
# Document files
# ---------------------------------------------------------------------------

# CP1252 covers Word exports with smart quotes at 0x93/0x94.
_DECODINGS: tuple[str, ...] = ("utf-8", "cp1252")


def read_file(fpath: Path, *, min_size: int = 0) -> str:
    """Decode a document file, tolerating legacy single-byte exports.

    Decodings are tried in order (UTF-8, then CP1252); if neither applies the
    bytes are decoded as UTF-8 with replacement characters.

    Args:
        fpath: File to read.
        min_size: Files smaller than this many bytes count as empty.

    Returns:
        Decoded text, or "" when the file is unreadable or too small.
    """
    try:
        raw = fpath.read_bytes()
    except OSError:
        return ""
    if len(raw) < min_size:
        return ""
    for encoding in _DECODINGS:
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue
    return raw.decode("utf-8", errors="replace")
