"""Sharding strategy shared by all frameworks.

A :class:`Sharder` turns one configured suite into the replicas that are
submitted as separate cloud jobs. The generic algorithm resolves the suite's
file patterns, subtracts the excluded files, lets the framework narrow the
set with its own filter, then splits per file or per concurrency slot.
Framework subclasses only override the hooks that differ.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any, ClassVar

from saucectl.models.suite import ShardMode, Suite
from saucectl.sharding.errors import NoMatchError, NoMatchingTestsError, ShardConfigError
from saucectl.sharding.resolver import FIND_BY_SHELL_PATTERN, resolve
from saucectl.sharding.splitter import bin_pack

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

logger = logging.getLogger(__name__)

_DEFAULT_MODES = frozenset({ShardMode.NONE, ShardMode.BY_FILE, ShardMode.BY_CONCURRENCY})


class Sharder:
    """Per-framework sharding strategy."""

    frameworks: ClassVar[tuple[str, ...]] = ()
    """Project ``kind`` values handled by this sharder."""

    match_by: ClassVar[str] = FIND_BY_SHELL_PATTERN
    """How ``file_patterns`` are interpreted (``shellpattern`` or ``regex``)."""

    supported_modes: ClassVar[frozenset[ShardMode]] = _DEFAULT_MODES

    # ── Entry point ──────────────────────────────────────────────

    def shard(self, suite: Suite, root_dir: str | Path, concurrency: int) -> list[Suite]:
        """Return the replicas for *suite*, or ``[suite]`` when it is not sharded.

        Raises:
            NoMatchError: When no file is left after resolving and excluding.
            NoMatchingTestsError: When the framework filter removes every file.
            ShardConfigError: When the shard settings are invalid.
        """
        self.validate(suite)
        if suite.shard is ShardMode.NONE:
            return [suite]

        files = self.resolve_files(suite, root_dir)
        files = self.filter_files(suite, root_dir, files)
        return self.split(suite, root_dir, files, concurrency)

    # ── Hooks ────────────────────────────────────────────────────

    def validate(self, suite: Suite) -> None:
        if suite.shard not in self.supported_modes:
            msg = (
                f"suite '{suite.name}': shard type '{suite.shard.value}' is not "
                f"supported for {self.frameworks[0] if self.frameworks else 'this framework'}"
            )
            raise ShardConfigError(msg)

    def resolve_files(self, suite: Suite, root_dir: str | Path) -> list[str]:
        files = resolve(root_dir, suite.file_patterns, suite.exclude_patterns, self.match_by)
        if not files:
            logger.error(
                "Suite '%s' patterns %s have no matching files in %s",
                suite.name,
                suite.file_patterns,
                root_dir,
            )
            raise NoMatchError(suite.name, str(root_dir), list(suite.file_patterns))
        return files

    def filter_files(
        self,
        suite: Suite,  # noqa: ARG002
        root_dir: str | Path,  # noqa: ARG002
        files: list[str],
    ) -> list[str]:
        """Narrow *files* with the framework's own filter. No-op by default."""
        return files

    def split(
        self,
        suite: Suite,
        root_dir: str | Path,  # noqa: ARG002
        files: list[str],
        concurrency: int,
    ) -> list[Suite]:
        if suite.shard is ShardMode.BY_FILE:
            return [self.replicate(suite, f"{suite.name} - {f}", [f]) for f in files]

        groups = bin_pack(files, concurrency)
        return [
            self.replicate(suite, f"{suite.name} - {i}/{len(groups)}", group)
            for i, group in enumerate(groups, start=1)
        ]

    def replicate(self, suite: Suite, name: str, selection: list[str]) -> Suite:
        """Copy *suite* under *name* with its file selection narrowed to *selection*."""
        return copy_suite(suite, name=name, file_patterns=list(selection))

    # ── Shared helpers ───────────────────────────────────────────

    @staticmethod
    def apply_filter(
        suite: Suite,
        files: list[str],
        expression: str,
        matcher: Callable[[list[str]], tuple[list[str], list[str]]],
    ) -> list[str]:
        """Run *matcher* over *files*, failing when nothing is left."""
        matched, unmatched = matcher(files)
        if not matched:
            logger.error(
                "No files in suite '%s' match the filter expression %r", suite.name, expression
            )
            raise NoMatchingTestsError(suite.name, expression)
        if unmatched:
            logger.info(
                "Files filtered out of suite '%s' by %r: %s", suite.name, expression, unmatched
            )
        return matched

    @staticmethod
    def split_by_index(suite: Suite, name_format: str) -> list[Suite]:
        """Create ``num_shards`` replicas that differ only by ``shard_index``.

        *name_format* receives ``name``, ``index`` (1-based) and ``total``.
        """
        total = suite.num_shards
        return [
            copy_suite(
                suite,
                name=name_format.format(name=suite.name, index=i + 1, total=total),
                shard_index=i,
            )
            for i in range(total)
        ]


def copy_suite(suite: Suite, **changes: Any) -> Suite:
    """Return a deep copy of *suite* with *changes* applied."""
    return replace(copy.deepcopy(suite), **changes)
