#!/usr/bin/env python3
"""Print the synthesized outline of a document: sections and pages.

Usage:
    # Sections and summary counts
    python3 scripts/document_outline.py --text report.txt

    # Include page boundaries, with HTML heading hints
    python3 scripts/document_outline.py --text report.txt --html report.html --pages

    # Page table from the heuristic paginator instead of the synthesizer
    python3 scripts/document_outline.py --text legacy.txt --split-pages --doc-file
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

from docsearch.html_utils import read_file, strip_html
from docsearch.io_utils import layout_to_dict, page_ref_to_dict
from docsearch.layout_types import LayoutConfig
from docsearch.page_layout import build_layout
from docsearch.page_tables import split_into_pages
from docsearch.text_normalize import normalize_text


def dump_json(obj: object) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Print the synthesized outline of a document."
    )
    parser.add_argument(
        "--text", type=Path, default=None, help="Extracted plain-text file"
    )
    parser.add_argument(
        "--html", type=Path, default=None, help="HTML rendering (heading hints)"
    )
    parser.add_argument(
        "--config", type=Path, default=None, help="layout_config.json"
    )
    parser.add_argument(
        "--pages", action="store_true", help="Include page boundaries in output."
    )
    parser.add_argument(
        "--content", action="store_true", help="Include page content (implies --pages)."
    )
    parser.add_argument(
        "--split-pages",
        action="store_true",
        help="Emit a page table from the heuristic paginator instead.",
    )
    parser.add_argument(
        "--doc-file",
        action="store_true",
        help="Input came from a legacy .doc extraction (smaller page estimate).",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    for label, path in (("text", args.text), ("html", args.html)):
        if path is not None and not path.exists():
            print(f"Error: {label} file not found: {path}", file=sys.stderr)
            sys.exit(1)
    if args.text is None and args.html is None:
        print("Error: one of --text or --html is required", file=sys.stderr)
        sys.exit(1)

    html_hint = read_file(args.html) if args.html is not None else None
    text = read_file(args.text) if args.text is not None else strip_html(html_hint or "")

    if args.split_pages:
        pages = split_into_pages(normalize_text(text), is_doc_file=args.doc_file)
        print(f"Split into {len(pages)} pages", file=sys.stderr)
        dump_json([page_ref_to_dict(p) for p in pages])
        return

    config = LayoutConfig.from_json(args.config) if args.config else LayoutConfig()
    layout = build_layout(text, html_hint, config)
    print(
        f"{layout.total_pages} pages, {len(layout.sections)} sections, "
        f"{layout.word_count} words",
        file=sys.stderr,
    )
    dump_json(layout_to_dict(
        layout,
        include_pages=args.pages or args.content,
        include_content=args.content,
    ))


if __name__ == "__main__":
    main()
