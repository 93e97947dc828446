"""Filter spec files with ``@cypress/grep`` title and tag expressions.

See https://www.npmjs.com/package/@cypress/grep for the syntax. The parsers
here mirror that plugin so a file is only kept for sharding when Cypress
would run at least one of its tests.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from saucectl.filters.expression import All, Any, Exact, Expression, Partial
from saucectl.parsing.javascript import parse_cypress

logger = logging.getLogger(__name__)

_TAG_GROUP_SEPARATOR = re.compile(r"[\s,]+")
_TITLE_SEPARATOR = ";"
_AND = "+"
_INVERT = "-"
_GLOBAL_INVERT = "--"


def parse_grep_exp(expression: str) -> Expression:
    """Parse a ``grep`` title expression.

    Terms are separated by ``;``. A title matches when it contains any plain
    term and none of the ``-`` prefixed (inverted) terms. Blank terms are
    ignored, so an empty expression matches every title. A bare ``-``
    excludes everything.
    """
    positives: list[Expression] = []
    inverted: list[Expression] = []
    for raw in expression.split(_TITLE_SEPARATOR):
        term = raw.strip()
        if term.startswith(_INVERT):
            inverted.append(Partial(term[len(_INVERT) :], invert=True))
        elif term:
            positives.append(Partial(term))

    if positives:
        return All((*inverted, Any(tuple(positives))))
    return All(tuple(inverted))


def parse_grep_tags_exp(expression: str) -> Expression:
    """Parse a ``grepTags`` expression.

    Whitespace or commas separate OR groups. Inside a group ``+`` joins
    tags that must all be present and a ``-`` prefix requires a tag to be
    absent. A ``--tag`` term excludes the tag from every group.
    """
    groups: list[list[Expression]] = []
    global_excludes: list[Expression] = []

    for part in _TAG_GROUP_SEPARATOR.split(expression):
        if not part:
            continue
        if part.startswith(_GLOBAL_INVERT):
            tag = part[len(_GLOBAL_INVERT) :]
            if tag:
                global_excludes.append(Exact(tag, invert=True))
            continue

        group: list[Expression] = []
        for tag in part.split(_AND):
            if tag.startswith(_INVERT):
                if tag[len(_INVERT) :]:
                    group.append(Exact(tag[len(_INVERT) :], invert=True))
            elif tag:
                group.append(Exact(tag))
        if group:
            groups.append(group)

    if global_excludes:
        groups = [g + global_excludes for g in groups] or [global_excludes]
    if not groups:
        return All()
    return Any(tuple(All(tuple(g)) for g in groups))


def match_files(
    root_dir: str | Path,
    files: list[str],
    title: str,
    tags: str,
) -> tuple[list[str], list[str]]:
    """Split *files* by whether any of their tests satisfies *title* and *tags*.

    Args:
        root_dir: Directory the file paths are relative to.
        files: Spec files to inspect.
        title: ``grep`` title expression.
        tags: ``grepTags`` tag expression.

    Returns:
        A ``(matched, unmatched)`` tuple, each preserving the input order.
        Files that cannot be read are reported as unmatched.
    """
    title_exp = parse_grep_exp(title)
    tags_exp = parse_grep_tags_exp(tags)
    root = Path(root_dir)

    matched: list[str] = []
    unmatched: list[str] = []
    for f in files:
        try:
            source = (root / f).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read %s, excluding it from grep matching: %s", f, exc)
            unmatched.append(f)
            continue

        if any(_match(title_exp, tags_exp, tc.title, tc.tags) for tc in parse_cypress(source)):
            matched.append(f)
        else:
            unmatched.append(f)

    return matched, unmatched


def _match(title_exp: Expression, tags_exp: Expression, title: str, tags: str) -> bool:
    # cypress-grep runs tests it cannot title, so an empty title always passes.
    title_match = title == "" or title_exp.eval(title)
    return title_match and tags_exp.eval(tags)
