"""Tests for docsearch.section_detector."""
from __future__ import annotations

from docsearch.layout_types import Section
from docsearch.section_detector import dedupe_sections, detect_sections


# ── Pattern pass ─────────────────────────────────────────────────────


class TestLabeledHeadings:
    def test_chapter_colon(self) -> None:
        text = "Chapter 1: Introduction\nSome text here."
        sections = detect_sections(text)
        assert sections == (Section(level=1, title="Introduction", start_index=0, end_index=23),)

    def test_case_insensitive_keyword(self) -> None:
        sections = detect_sections("intro\nSECTION 4: Scope of Work\nbody")
        assert [(s.level, s.title) for s in sections] == [(1, "Scope of Work")]

    def test_title_is_rest_after_single_separator(self) -> None:
        sections = detect_sections("Section 4 - Scope\nbody")
        assert sections == (Section(level=1, title="- Scope", start_index=0, end_index=17),)

    def test_part_with_space_separator(self) -> None:
        sections = detect_sections("Part 2 Appendix\nbody")
        assert sections[0].title == "Appendix"
        assert sections[0].level == 1


class TestNumberedHeadings:
    def test_dotted_depth_sets_level(self) -> None:
        sections = detect_sections("2.1.3 Deep Topic\nbody")
        assert [(s.level, s.title) for s in sections] == [(3, "Deep Topic")]

    def test_level_capped_at_six(self) -> None:
        sections = detect_sections("1.2.3.4.5.6.7 Very Deep\nbody")
        assert sections[0].level == 6

    def test_undotted_number_is_top_level(self) -> None:
        sections = detect_sections("4 Methods\nbody")
        assert [(s.level, s.title) for s in sections] == [(1, "Methods")]

    def test_offsets_use_line_start(self) -> None:
        text = "intro\n   1.1 Indented Heading\nbody"
        sections = detect_sections(text)
        assert len(sections) == 1
        assert sections[0].start_index == 6
        assert sections[0].end_index == 6 + len("1.1 Indented Heading")


class TestCapsAndUnderlineHeadings:
    def test_all_caps_line_yields_two_sections_under_basic_rules(self) -> None:
        sections = detect_sections("INTRODUCTION\nbody text")
        assert [(s.level, s.title) for s in sections] == [
            (1, "INTRODUCTION"),
            (2, "INTRODUCTION"),
        ]
        assert sections[0].start_index == sections[1].start_index == 0

    def test_advanced_rules_skip_short_caps_rule(self) -> None:
        sections = detect_sections("INTRODUCTION\nbody text", rules="advanced")
        assert [(s.level, s.title) for s in sections] == [(1, "INTRODUCTION")]

    def test_dedupe_keeps_first_per_span(self) -> None:
        sections = detect_sections("INTRODUCTION\nbody text", dedupe=True)
        assert [(s.level, s.title) for s in sections] == [(1, "INTRODUCTION")]

    def test_short_caps_rule_alone(self) -> None:
        # Digits and punctuation defeat the letters-only caps pattern.
        sections = detect_sections("KEY RESULTS: 2024\nbody")
        assert [(s.level, s.title) for s in sections] == [(2, "KEY RESULTS: 2024")]
        assert detect_sections("KEY RESULTS: 2024\nbody", rules="advanced") == ()

    def test_short_caps_requires_following_content(self) -> None:
        sections = detect_sections("FINAL NOTES\n\nbody")
        assert [(s.level, s.title) for s in sections] == [(1, "FINAL NOTES")]

    def test_short_caps_minimum_length(self) -> None:
        sections = detect_sections("ABCDE\nbody")
        assert [(s.level, s.title) for s in sections] == [(1, "ABCDE")]

    def test_underlined_heading(self) -> None:
        sections = detect_sections("Overview\n========\ntext")
        assert sections == (Section(level=2, title="Overview", start_index=0, end_index=8),)

    def test_dash_underline(self) -> None:
        sections = detect_sections("intro\nBackground\n---\ntext")
        assert [(s.level, s.title, s.start_index) for s in sections] == [
            (2, "Background", 6),
        ]

    def test_plain_prose_has_no_sections(self) -> None:
        assert detect_sections("Just some text.\nAnd more of it.") == ()

    def test_empty_text(self) -> None:
        assert detect_sections("") == ()


# ── HTML hint pass ───────────────────────────────────────────────────


class TestHtmlHint:
    def test_titles_anchored_case_insensitively(self) -> None:
        text = "Annual Report\nIntro text\nFinancial Summary\nnumbers"
        html = (
            "<h1>Annual Report</h1>"
            "<h2>financial summary</h2>"
            "<h2>Missing Heading</h2>"
        )
        sections = detect_sections(text, html)
        assert sections == (
            Section(level=1, title="Annual Report", start_index=0, end_index=13),
            Section(level=2, title="financial summary", start_index=25, end_index=42),
        )

    def test_first_occurrence_only(self) -> None:
        text = "Results\nmore Results"
        sections = detect_sections(text, "<h2>Results</h2>")
        assert [s.start_index for s in sections] == [0]

    def test_html_sections_precede_pattern_sections_on_ties(self) -> None:
        sections = detect_sections("OVERVIEW\nbody", "<h3>Overview</h3>")
        assert [(s.level, s.title) for s in sections] == [
            (3, "Overview"),
            (1, "OVERVIEW"),
            (2, "OVERVIEW"),
        ]

    def test_output_sorted_by_start(self) -> None:
        text = "1 First\nbody\nGuide Part\nmore\n2 Second\nend"
        sections = detect_sections(text, "<h1>Guide Part</h1><h1>First</h1>")
        starts = [s.start_index for s in sections]
        assert starts == sorted(starts)


class TestDedupeSections:
    def test_keeps_distinct_spans(self) -> None:
        a = Section(1, "A", 0, 5)
        b = Section(2, "A", 0, 5)
        c = Section(2, "C", 10, 15)
        assert dedupe_sections([a, b, c]) == [a, c]
