#!/usr/bin/env python3
"""Search one document and print attributed matches as JSON.

Builds a synthetic layout (pages + sections) over the document text and runs
a literal, whole-word, wildcard or regex query against it. With
--page-table, runs the first-occurrence search against a pre-chunked page
table instead (the server-side path).

Usage:
    python3 scripts/document_search.py --text report.txt --query "revenue"

    python3 scripts/document_search.py --text report.txt --html report.html \
      --query "c?st*" --wildcards --whole-word

    python3 scripts/document_search.py --text report.txt --query "Total" \
      --page-table report.pages.json --match-case
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

from docsearch.html_utils import read_file, strip_html
from docsearch.io_utils import load_page_table, match_to_dict, text_hit_to_dict
from docsearch.layout_types import LayoutConfig, SearchOptions
from docsearch.page_layout import build_layout
from docsearch.page_tables import find_in_page_table
from docsearch.search_engine import search_document


def dump_json(obj: object) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Search one document and print attributed matches as JSON."
    )
    parser.add_argument(
        "--text", type=Path, default=None, help="Extracted plain-text file"
    )
    parser.add_argument(
        "--html",
        type=Path,
        default=None,
        help="HTML rendering of the same document (heading hints). "
        "Used as the text source when --text is omitted.",
    )
    parser.add_argument("--query", required=True, help="Search query")
    parser.add_argument("--match-case", action="store_true", help="Case-sensitive")
    parser.add_argument("--whole-word", action="store_true", help="Whole words only")
    parser.add_argument(
        "--wildcards", action="store_true", help="'*' = any run, '?' = any char"
    )
    parser.add_argument(
        "--regex", action="store_true", help="Query is a regex (wins over --wildcards)"
    )
    parser.add_argument(
        "--backwards", action="store_true", help="Return matches last-to-first"
    )
    parser.add_argument(
        "--config", type=Path, default=None, help="layout_config.json"
    )
    parser.add_argument(
        "--page-table",
        type=Path,
        default=None,
        help="Pre-chunked page table JSON; runs the first-occurrence search",
    )
    parser.add_argument(
        "--max-results",
        type=int,
        default=None,
        help="Maximum number of matches to print (default: all)",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def _load_inputs(args: argparse.Namespace) -> tuple[str, str | None]:
    """Return (text, html_hint); exits with status 1 on missing files."""
    for label, path in (("text", args.text), ("html", args.html)):
        if path is not None and not path.exists():
            print(f"Error: {label} file not found: {path}", file=sys.stderr)
            sys.exit(1)
    if args.text is None and args.html is None:
        print("Error: one of --text or --html is required", file=sys.stderr)
        sys.exit(1)

    html_hint = read_file(args.html) if args.html is not None else None
    text = read_file(args.text) if args.text is not None else strip_html(html_hint or "")
    return text, html_hint


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    text, html_hint = _load_inputs(args)
    config = LayoutConfig.from_json(args.config) if args.config else LayoutConfig()

    if args.page_table is not None:
        if not args.page_table.exists():
            print(f"Error: page table not found: {args.page_table}", file=sys.stderr)
            sys.exit(1)
        hit = find_in_page_table(
            text,
            args.query,
            load_page_table(args.page_table),
            match_case=args.match_case,
            context_chars=config.context_chars,
        )
        if hit is None:
            print("No match found", file=sys.stderr)
            dump_json(None)
            return
        print(
            f"First match on page {hit.page_number}, line {hit.line_number} "
            f"(resolved by {hit.method})",
            file=sys.stderr,
        )
        dump_json(text_hit_to_dict(hit))
        return

    options = SearchOptions(
        match_case=args.match_case,
        whole_word=args.whole_word,
        use_wildcards=args.wildcards,
        use_regex=args.regex,
        search_backwards=args.backwards,
    )
    layout = build_layout(text, html_hint, config)
    matches = search_document(layout, args.query, options, config)

    pages_hit = {m.page_number for m in matches}
    print(
        f"Found {len(matches)} matches on {len(pages_hit)} of "
        f"{layout.total_pages} pages",
        file=sys.stderr,
    )
    if args.max_results is not None:
        matches = matches[:args.max_results]
    dump_json([match_to_dict(m) for m in matches])


if __name__ == "__main__":
    main()
