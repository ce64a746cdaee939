"""Core types for layout synthesis and search.

Every component shares these types. All offsets are global char positions
in the normalized document text (never page-relative). All dataclasses use
frozen=True, slots=True; sequences are tuples so a built layout can be
shared between concurrent searches without copying.

Type hierarchy:
  Ok[T] / Err[E]     — Strict algebraic Result type
  LayoutConfig       — Page budgets, context window, detector rule set
  Section            — Detected heading with nesting level and span
  Page               — Synthetic, budget-bounded slice of the text
  DocumentLayout     — Text + sections + pages + summary counts
  SearchOptions      — Closed set of query flags
  Match              — One located occurrence with attribution and context
  QueryCompileError  — Typed failure of the query compiler
  PageRef            — Entry of a pre-chunked page table
  PageResolution     — Outcome of the offset -> page fallback chain
  TextHit            — First-occurrence hit against a page table
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generic, Literal, TypeAlias, TypeVar

import orjson

# ---------------------------------------------------------------------------
# Result ADT
# ---------------------------------------------------------------------------

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success case of Result[T, E].

    Usage::

        result = compile_query("c?t", options)
        match result:
            case Ok(value=pattern): ...
            case Err(error=e): print(e.reason)
    """
    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure case of Result[T, E]. Keeps the typed reason instead of None."""
    error: E


Result: TypeAlias = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

SectionRules: TypeAlias = Literal["basic", "advanced"]

_SECTION_RULES: frozenset[str] = frozenset({"basic", "advanced"})


@dataclass(frozen=True, slots=True)
class LayoutConfig:
    """Tunables for page synthesis, section detection and match context.

    Defaults: 50 lines of 80 chars per page (4000 chars), a 100-char
    context window on each side of a match, and the "basic" detector rules
    (which add the short all-caps heading rule on top of the "advanced" set).
    """
    lines_per_page: int = 50
    chars_per_line: int = 80
    context_chars: int = 100
    section_rules: SectionRules = "basic"
    dedupe_sections: bool = False

    def __post_init__(self) -> None:
        if self.lines_per_page < 1:
            raise ValueError(f"lines_per_page must be >= 1, got {self.lines_per_page}")
        if self.chars_per_line < 1:
            raise ValueError(f"chars_per_line must be >= 1, got {self.chars_per_line}")
        if self.context_chars < 0:
            raise ValueError(f"context_chars must be >= 0, got {self.context_chars}")
        if self.section_rules not in _SECTION_RULES:
            raise ValueError(
                f"section_rules must be one of {sorted(_SECTION_RULES)}, "
                f"got {self.section_rules!r}",
            )

    @property
    def chars_per_page(self) -> int:
        return self.chars_per_line * self.lines_per_page

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LayoutConfig:
        """Build from a plain mapping. Unknown keys are ignored."""
        return cls(
            lines_per_page=int(data.get("lines_per_page", 50)),
            chars_per_line=int(data.get("chars_per_line", 80)),
            context_chars=int(data.get("context_chars", 100)),
            section_rules=data.get("section_rules", "basic"),
            dedupe_sections=bool(data.get("dedupe_sections", False)),
        )

    @classmethod
    def from_json(cls, path: Path) -> LayoutConfig:
        """Load from a layout_config.json file."""
        data = orjson.loads(path.read_bytes())
        if not isinstance(data, dict):
            raise ValueError(f"layout config must be a JSON object: {path}")
        return cls.from_dict(data)


DEFAULT_CONFIG = LayoutConfig()


# ---------------------------------------------------------------------------
# Layout types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Section:
    """A detected heading (e.g., "2.1 Scope" -> level 2, title "Scope").

    Bounds are inclusive for containment tests: an offset belongs to the
    section when start_index <= offset <= end_index.
    """
    level: int          # 1-6, 1 = top-level
    title: str
    start_index: int
    end_index: int

    def contains(self, offset: int) -> bool:
        return self.start_index <= offset <= self.end_index


@dataclass(frozen=True, slots=True)
class PageRef:
    """A page table entry produced outside the synthesizer.

    Upstream paginators compute their own boundaries, so offsets are not
    guaranteed to agree with the text a search runs over.
    """
    page_number: int
    content: str
    start_index: int
    end_index: int


@dataclass(frozen=True, slots=True)
class Page:
    """A synthetic page: consecutive lines under the line/char budgets."""
    page_number: int                # 1-based, no gaps
    content: str                    # Lines joined by "\n"
    start_index: int                # 0, else previous end_index + 1
    end_index: int                  # Offset just past the last line
    sections: tuple[Section, ...]   # Sections intersecting the page
    line_count: int

    def contains(self, offset: int) -> bool:
        return self.start_index <= offset <= self.end_index

    def to_ref(self) -> PageRef:
        return PageRef(
            page_number=self.page_number,
            content=self.content,
            start_index=self.start_index,
            end_index=self.end_index,
        )


@dataclass(frozen=True, slots=True)
class DocumentLayout:
    """Synthesized view of one document. Immutable once built."""
    text: str
    sections: tuple[Section, ...]
    pages: tuple[Page, ...]
    total_pages: int
    word_count: int
    character_count: int


# ---------------------------------------------------------------------------
# Search types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SearchOptions:
    """Query flags. use_regex takes precedence over use_wildcards."""
    match_case: bool
    whole_word: bool
    use_wildcards: bool
    use_regex: bool
    search_backwards: bool

    @classmethod
    def default(cls) -> SearchOptions:
        return cls(
            match_case=False,
            whole_word=False,
            use_wildcards=False,
            use_regex=False,
            search_backwards=False,
        )


@dataclass(frozen=True, slots=True)
class Match:
    """One located occurrence of a query.

    NOTE: context is text[ctx_start:ctx_end] and always equals
    before_context + text + after_context.
    """
    text: str
    start_index: int
    end_index: int                  # Exclusive
    page_number: int
    line_number: int                # 1-based
    section_title: str | None
    context: str
    before_context: str
    after_context: str


@dataclass(frozen=True, slots=True)
class QueryCompileError:
    """Typed failure for query compilation (malformed user pattern)."""
    query: str
    pattern: str    # The pattern body handed to re.compile
    reason: str     # re.error message


ResolutionMethod: TypeAlias = Literal["containment", "content_scan", "nearest", "single_page"]


@dataclass(frozen=True, slots=True)
class PageResolution:
    """Which page an offset was attributed to, and by which fallback tier."""
    page_number: int
    method: ResolutionMethod
    distance: int = 0               # Only non-zero for method == "nearest"
    page: PageRef | None = None     # None when the table was empty


@dataclass(frozen=True, slots=True)
class TextHit:
    """First literal occurrence of a query in a document with a page table."""
    page_number: int
    line_number: int                # 1-based line of the occurrence
    position: int                   # Offset of the occurrence in the full text
    snippet: str                    # Trimmed, "..."-marked where clipped
    method: ResolutionMethod
