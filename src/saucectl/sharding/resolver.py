"""Test file discovery from shell patterns or regular expressions."""

from __future__ import annotations

import logging
import re
from pathlib import Path, PurePath
from typing import TYPE_CHECKING

from wcmatch import glob

from saucectl.sharding.errors import PatternResolutionError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

FIND_BY_SHELL_PATTERN = "shellpattern"
FIND_BY_REGEX = "regex"

_RECURSIVE_WILDCARD = "**"

# "**" spans directories and "{a,b}" alternates. Dotfiles are not special.
_GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.DOTGLOB | glob.NODIR


def find_files(
    root_dir: str | Path,
    patterns: list[str],
    match_by: str = FIND_BY_SHELL_PATTERN,
) -> list[str]:
    """Return the files below *root_dir* selected by *patterns*.

    Each pattern is expanded on its own and the matches are unioned.
    Malformed patterns are skipped with a warning instead of aborting the
    whole resolution.

    Args:
        root_dir: Directory the patterns are relative to.
        patterns: Shell glob patterns (``*``, ``?``, ``[...]``, ``**``, ``{a,b}``) or
            regular expressions, depending on *match_by*.
        match_by: ``"shellpattern"`` or ``"regex"``.

    Returns:
        Sorted, deduplicated list of POSIX-style paths relative to *root_dir*.
    """
    if match_by not in (FIND_BY_SHELL_PATTERN, FIND_BY_REGEX):
        msg = f"unknown match mode {match_by!r}"
        raise ValueError(msg)

    root = Path(root_dir)
    files: set[str] = set()
    for pattern in patterns:
        try:
            if match_by == FIND_BY_REGEX:
                files.update(_match_regex(root, pattern))
            else:
                files.update(_match_glob(root, pattern))
        except PatternResolutionError as exc:
            logger.warning(
                "Skipping over malformed pattern %r. Some of your test files will be missing: %s",
                pattern,
                exc.reason,
            )
    return sorted(files)


def exclude_files(files: list[str], excluded: list[str]) -> list[str]:
    """Return *files* without the entries in *excluded*, preserving order."""
    if not excluded:
        return list(files)
    skip = set(excluded)
    return [f for f in files if f not in skip]


def resolve(
    root_dir: str | Path,
    include: list[str],
    exclude: list[str] | None = None,
    match_by: str = FIND_BY_SHELL_PATTERN,
) -> list[str]:
    """Resolve *include* patterns and subtract the files matched by *exclude*."""
    files = find_files(root_dir, include, match_by)
    if not exclude:
        return files
    return exclude_files(files, find_files(root_dir, exclude, match_by))


# ── Matching helpers ─────────────────────────────────────────────


def _match_glob(root: Path, pattern: str) -> Iterator[str]:
    normalized = _normalize_pattern(pattern)
    try:
        candidates = glob.glob(normalized, flags=_GLOB_FLAGS, root_dir=str(root))
    except ValueError as exc:
        raise PatternResolutionError(pattern, str(exc)) from exc

    for candidate in candidates:
        if (root / candidate).is_file():
            yield PurePath(candidate).as_posix()


def _normalize_pattern(pattern: str) -> str:
    if not pattern.strip():
        raise PatternResolutionError(pattern, "empty pattern")

    normalized = PurePath(pattern.replace("\\", "/")).as_posix()
    if PurePath(normalized).is_absolute():
        raise PatternResolutionError(pattern, "absolute patterns are not allowed")

    # "dir/**" selects every file below dir, not just the directories.
    if normalized == _RECURSIVE_WILDCARD or normalized.endswith("/" + _RECURSIVE_WILDCARD):
        normalized += "/*"
    return normalized


def _match_regex(root: Path, pattern: str) -> Iterator[str]:
    try:
        regex = re.compile(pattern)
    except re.error as exc:
        raise PatternResolutionError(pattern, str(exc)) from exc

    for rel in _walk(root):
        if regex.search(rel):
            yield rel


def _walk(root: Path) -> Iterator[str]:
    """Yield every file below *root* as a relative POSIX path."""
    for path in root.rglob("*"):
        if path.is_file():
            yield path.relative_to(root).as_posix()
