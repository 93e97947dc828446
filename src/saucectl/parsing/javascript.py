"""Regex-based extraction of test declarations from JavaScript spec files.

This is source scraping, not a JavaScript parser. It recognises the call
shapes test authors conventionally write::

    it('title', { tags: ['@a', '@b'] }, () => { ... })
    test('title', async ({ page }) => { ... })
    test.describe('group', () => { ... })

The pipeline has three passes: locate the call and capture its argument
list up to the callback, pull the quoted title out of it, then pull the
optional ``tags``/``tag`` field. Multi-line declarations, mixed quote styles
and trailing commas are tolerated. Anything more exotic (computed titles,
tags built from variables) is silently ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Argument list from the opening parenthesis up to the callback's "(".
_CYPRESS_CALL_RE = re.compile(
    r"^[ \t]*(?:it|test)(?:\.\w+)?(\([\s\S]*?,\s*(?:function)?\s*\()",
    re.MULTILINE,
)
_PLAYWRIGHT_CALL_RE = re.compile(
    r"^[ \t]*test(?:\.describe)?(?:\.\w+)?(\([\s\S]*?,\s*(?:async)?\s*(?:function)?\s*\()",
    re.MULTILINE,
)
_TITLE_RE = re.compile(r"\(\s*[\"'`](.*?)[\"'`]\s*,|[{(]")

_CYPRESS_SINGLE_TAG_RE = re.compile(r"tags\s*:\s*['\"`](.*?)[\"'`]")
_CYPRESS_MULTI_TAG_RE = re.compile(r"tags\s*:\s*\[([\s\S]*?)\]")
_PLAYWRIGHT_SINGLE_TAG_RE = re.compile(r"\btags?\s*:\s*['\"`](.*?)[\"'`]")
_PLAYWRIGHT_MULTI_TAG_RE = re.compile(r"\btags?\s*:\s*\[([\s\S]*?)\]")

_QUOTES = "\"'`"


@dataclass(frozen=True)
class TestCase:
    """Title and tags of one declared test."""

    title: str
    tags: str = ""
    """Space-joined tag list."""


def parse_cypress(source: str) -> list[TestCase]:
    """Extract ``it(...)`` / ``test(...)`` declarations with cypress-grep tags."""
    return [
        TestCase(
            title=_parse_title(args),
            tags=_parse_tags(args, _CYPRESS_SINGLE_TAG_RE, _CYPRESS_MULTI_TAG_RE),
        )
        for args in _CYPRESS_CALL_RE.findall(source)
    ]


def parse_playwright(source: str) -> list[TestCase]:
    """Extract ``test(...)`` / ``test.describe(...)`` declarations.

    Playwright takes tags from the title (``'login @smoke'``) or from the
    ``tag`` detail; the latter is returned in ``tags``.
    """
    return [
        TestCase(
            title=_parse_title(args),
            tags=_parse_tags(args, _PLAYWRIGHT_SINGLE_TAG_RE, _PLAYWRIGHT_MULTI_TAG_RE),
        )
        for args in _PLAYWRIGHT_CALL_RE.findall(source)
    ]


def _parse_title(args: str) -> str:
    match = _TITLE_RE.search(args)
    if match is None:
        return ""
    return match.group(1) or ""


def _parse_tags(args: str, single_re: re.Pattern[str], multi_re: re.Pattern[str]) -> str:
    match = single_re.search(args) or multi_re.search(args)
    if match is None:
        return ""

    tags = []
    for raw in match.group(1).split(","):
        tag = raw.strip().strip(_QUOTES)
        if tag:
            tags.append(tag)
    return " ".join(tags)
