"""Filter feature files by Cucumber tag expressions."""

from __future__ import annotations

import logging
from pathlib import Path

from saucectl.filters.tag_expression import TagExpressionError, parse
from saucectl.parsing.gherkin import GherkinParseError, parse_feature

logger = logging.getLogger(__name__)


def combine_tags(tags: list[str]) -> str:
    """Join several tag expressions so that all of them must hold."""
    return " and ".join(f"({t})" for t in tags if t.strip())


def match_files(
    root_dir: str | Path,
    files: list[str],
    tag_expression: str,
) -> tuple[list[str], list[str]]:
    """Split feature *files* by whether any scenario satisfies *tag_expression*.

    A malformed expression matches no file: everything is returned as
    unmatched and a warning is logged. Unreadable or unparsable files are
    reported as unmatched.

    Returns:
        A ``(matched, unmatched)`` tuple, each preserving the input order.
    """
    try:
        matcher = parse(tag_expression)
    except TagExpressionError as exc:
        logger.warning("Ignoring tag filter, no feature file will match: %s", exc)
        return [], list(files)

    root = Path(root_dir)
    matched: list[str] = []
    unmatched: list[str] = []
    for f in files:
        try:
            scenarios = parse_feature((root / f).read_text(encoding="utf-8"), uri=f)
        except (OSError, UnicodeDecodeError, GherkinParseError) as exc:
            logger.warning(
                "Could not parse %s. It will be excluded from sharded execution: %s", f, exc
            )
            unmatched.append(f)
            continue

        if any(matcher.evaluate(s.tags) for s in scenarios):
            matched.append(f)
        else:
            unmatched.append(f)

    return matched, unmatched
