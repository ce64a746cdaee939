"""Compile a user query plus SearchOptions into one regex pattern.

Precedence:
    1. use_regex      — query is the pattern body, verbatim.
    2. use_wildcards  — literal query where ``*`` = any run, ``?`` = any char.
    3. literal        — the whole query escaped.

whole_word wraps modes 2 and 3 in ``\\b`` anchors. Matching is
case-insensitive unless match_case is set. Malformed user patterns come back
as ``Err(QueryCompileError)``; this module never raises on user input.
"""
from __future__ import annotations

import re

from docsearch.layout_types import Err, Ok, QueryCompileError, Result, SearchOptions

_ESCAPED_STAR = re.escape("*")
_ESCAPED_QMARK = re.escape("?")


def wildcard_to_regex(query: str) -> str:
    """Translate a wildcard query into a regex body.

    >>> wildcard_to_regex("c?t*")
    'c.t.*'
    """
    body = re.escape(query)
    body = body.replace(_ESCAPED_STAR, ".*")
    return body.replace(_ESCAPED_QMARK, ".")


def build_pattern_body(query: str, options: SearchOptions) -> str:
    """Pattern source for *query* under *options* (before compilation)."""
    if options.use_regex:
        return query
    body = wildcard_to_regex(query) if options.use_wildcards else re.escape(query)
    if options.whole_word:
        body = rf"\b{body}\b"
    return body


def compile_query(
    query: str,
    options: SearchOptions,
) -> Result[re.Pattern[str], QueryCompileError]:
    """Compile *query* into a pattern honoring *options*.

    Returns:
        Ok(pattern) on success, Err(QueryCompileError) if the resulting
        pattern is not valid regex syntax.
    """
    body = build_pattern_body(query, options)
    flags = 0 if options.match_case else re.IGNORECASE
    try:
        return Ok(re.compile(body, flags))
    except re.error as exc:
        return Err(QueryCompileError(query=query, pattern=body, reason=str(exc)))
