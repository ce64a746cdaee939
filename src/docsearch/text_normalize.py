"""Deterministic text normalization ahead of layout synthesis."""

from __future__ import annotations

import re

_LINE_BREAK_RE = re.compile(r"\r\n?")

TAB_WIDTH = 4


def normalize_text(text: str) -> str:
    """Canonicalize extracted text.

    Transforms, in order:
    1. Collapse CRLF and bare CR to LF.
    2. Expand each tab to four spaces.
    3. Strip leading/trailing whitespace from the whole document.

    Idempotent: ``normalize_text(normalize_text(t)) == normalize_text(t)``.
    """
    if not text:
        return ""
    text = _LINE_BREAK_RE.sub("\n", text)
    text = text.replace("\t", " " * TAB_WIDTH)
    return text.strip()


def count_words(text: str) -> int:
    """Number of whitespace-separated non-empty tokens."""
    return len(text.split())
