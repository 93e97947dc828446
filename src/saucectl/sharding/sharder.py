"""Entry point turning a project's suites into the replicas to run."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from saucectl.frameworks import get_sharder
from saucectl.sharding.errors import ShardConfigError

if TYPE_CHECKING:
    from pathlib import Path

    from saucectl.models.suite import Suite

logger = logging.getLogger(__name__)


def shard_suites(
    suites: list[Suite],
    root_dir: str | Path,
    concurrency: int = 1,
) -> list[Suite]:
    """Shard every suite with its framework's sharder, keeping suite order.

    Unsharded suites are passed through unchanged.

    Raises:
        NoMatchError: A sharded suite's patterns match no file.
        NoMatchingTestsError: A grep or tag filter leaves no file.
        ShardConfigError: A suite's shard settings are invalid.
    """
    sharded: list[Suite] = []
    for suite in suites:
        replicas = get_sharder(suite.framework).shard(suite, root_dir, concurrency)
        if suite.is_sharded:
            logger.debug("Suite '%s' sharded into %d replicas", suite.name, len(replicas))
        sharded.extend(replicas)
    return sharded


def filter_suites(suites: list[Suite], name: str) -> list[Suite]:
    """Return only the suite called *name*.

    Raises:
        ShardConfigError: If no suite has that name.
    """
    for suite in suites:
        if suite.name == name:
            return [suite]
    msg = f"no suite named '{name}' found"
    raise ShardConfigError(msg)


def shard_types(suites: list[Suite]) -> list[str]:
    """Return the distinct shard modes configured across *suites*."""
    return sorted({s.shard.value for s in suites if s.shard.value})


def shard_opts(suites: list[Suite]) -> dict[str, bool]:
    """Return the filtering options enabled by at least one suite."""
    opts: dict[str, bool] = {}
    for suite in suites:
        if suite.shard_grep_enabled:
            opts["shard_by_grep"] = True
        if suite.shard_tags_enabled:
            opts["shard_tags_enabled"] = True
    return opts
