"""Filter spec files the way Playwright's ``--grep``/``--grep-invert`` would.

See https://playwright.dev/docs/test-annotations#tag-tests for details.

Unlike the cypress and cucumber filters, an invalid pattern does not
exclude anything: it is logged and ignored, and with no usable pattern
every file matches. Existing configurations rely on this, so it stays.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from saucectl.parsing.javascript import TestCase, parse_playwright

logger = logging.getLogger(__name__)


def compile_patterns(
    grep: str,
    grep_invert: str,
) -> tuple[re.Pattern[str] | None, re.Pattern[str] | None]:
    """Compile *grep* and *grep_invert*; empty or invalid patterns become ``None``."""
    return _compile(grep, "grep"), _compile(grep_invert, "grepInvert")


def match_files(
    root_dir: str | Path,
    files: list[str],
    grep: str,
    grep_invert: str = "",
) -> tuple[list[str], list[str]]:
    """Split *files* by whether the file name or a test title matches.

    A file is matched when its name satisfies the patterns. Otherwise, when
    ``grep_invert`` is set the file is unmatched right away; when it is not,
    the file's tests are parsed and the file matches if any title does.

    Returns:
        A ``(matched, unmatched)`` tuple, each preserving the input order.
    """
    grep_re, invert_re = compile_patterns(grep, grep_invert)
    root = Path(root_dir)

    matched: list[str] = []
    unmatched: list[str] = []
    for f in files:
        if _match(f, grep_re, invert_re):
            matched.append(f)
            continue

        if invert_re is not None:
            unmatched.append(f)
            continue

        try:
            source = (root / f).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read %s, excluding it from grep matching: %s", f, exc)
            unmatched.append(f)
            continue

        if any(_match(_searchable(tc), grep_re, invert_re) for tc in parse_playwright(source)):
            matched.append(f)
        else:
            unmatched.append(f)

    return matched, unmatched


def _compile(pattern: str, option: str) -> re.Pattern[str] | None:
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        logger.warning("Invalid %s pattern %r will not filter any file: %s", option, pattern, exc)
        return None


def _searchable(tc: TestCase) -> str:
    return f"{tc.title} {tc.tags}" if tc.tags else tc.title


def _match(
    value: str,
    grep_re: re.Pattern[str] | None,
    invert_re: re.Pattern[str] | None,
) -> bool:
    if not value:
        return True
    if grep_re is not None and grep_re.search(value) is None:
        return False
    return invert_re is None or invert_re.search(value) is None
