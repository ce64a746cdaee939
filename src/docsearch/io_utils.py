"""I/O utilities: orjson JSON files and dict serialization of results.

Layouts, matches and page tables serialize to plain dicts with stable key
order so snapshots diff cleanly.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson

from docsearch.layout_types import DocumentLayout, Match, Page, PageRef, Section, TextHit


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    path.write_bytes(orjson.dumps(obj, option=opts))


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def section_to_dict(section: Section) -> dict[str, object]:
    return {
        "level": section.level,
        "title": section.title,
        "start_index": section.start_index,
        "end_index": section.end_index,
    }


def page_to_dict(page: Page, *, include_content: bool = False) -> dict[str, object]:
    out: dict[str, object] = {
        "page_number": page.page_number,
        "start_index": page.start_index,
        "end_index": page.end_index,
        "line_count": page.line_count,
        "sections": [s.title for s in page.sections],
    }
    if include_content:
        out["content"] = page.content
    return out


def layout_to_dict(
    layout: DocumentLayout,
    *,
    include_pages: bool = True,
    include_content: bool = False,
) -> dict[str, object]:
    """Serialize a layout summary (text omitted; it is usually the input)."""
    out: dict[str, object] = {
        "total_pages": layout.total_pages,
        "word_count": layout.word_count,
        "character_count": layout.character_count,
        "sections": [section_to_dict(s) for s in layout.sections],
    }
    if include_pages:
        out["pages"] = [
            page_to_dict(p, include_content=include_content) for p in layout.pages
        ]
    return out


def page_ref_to_dict(page: PageRef) -> dict[str, object]:
    return {
        "page_number": page.page_number,
        "content": page.content,
        "start_index": page.start_index,
        "end_index": page.end_index,
    }


def match_to_dict(match: Match) -> dict[str, object]:
    return {
        "text": match.text,
        "start_index": match.start_index,
        "end_index": match.end_index,
        "page_number": match.page_number,
        "line_number": match.line_number,
        "section_title": match.section_title,
        "context": match.context,
        "before_context": match.before_context,
        "after_context": match.after_context,
    }


def text_hit_to_dict(hit: TextHit) -> dict[str, object]:
    return {
        "page_number": hit.page_number,
        "line_number": hit.line_number,
        "position": hit.position,
        "snippet": hit.snippet,
        "method": hit.method,
    }


def load_page_table(path: Path) -> tuple[PageRef, ...]:
    """Load a page table: a JSON list of {page_number, content, start_index, end_index}.

    Raises:
        ValueError: If the file is not a list of page objects.
    """
    data = load_json(path)
    if not isinstance(data, list):
        raise ValueError(f"page table must be a JSON list: {path}")
    pages: list[PageRef] = []
    for row in data:
        if not isinstance(row, dict):
            raise ValueError(f"page table entries must be objects: {path}")
        pages.append(PageRef(
            page_number=int(row["page_number"]),
            content=str(row.get("content", "")),
            start_index=int(row["start_index"]),
            end_index=int(row["end_index"]),
        ))
    return tuple(pages)
