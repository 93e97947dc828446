"""Playwright suites: regex ``testMatch``, grep filtering and ``numShards``."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from saucectl.filters import playwright_grep
from saucectl.frameworks.base import Sharder
from saucectl.models.suite import ShardMode
from saucectl.sharding.errors import ShardConfigError
from saucectl.sharding.resolver import FIND_BY_REGEX

if TYPE_CHECKING:
    from pathlib import Path

    from saucectl.models.suite import Suite

_SHARD_NAME_FORMAT = "{name} (shard {index}/{total})"


class PlaywrightSharder(Sharder):
    """Shards ``testMatch`` regex matches or fans out by ``numShards``.

    ``numShards`` leaves the split to Playwright's own ``--shard i/n``;
    each replica carries its ``shard_index``.
    """

    frameworks = ("playwright",)
    match_by = FIND_BY_REGEX

    def shard(self, suite: Suite, root_dir: str | Path, concurrency: int) -> list[Suite]:
        self.validate(suite)
        if suite.num_shards > 1:
            return self.split_by_index(suite, _SHARD_NAME_FORMAT)
        return super().shard(suite, root_dir, concurrency)

    def validate(self, suite: Suite) -> None:
        if suite.num_shards > 0 and suite.shard is not ShardMode.NONE:
            msg = f"suite name: {suite.name} numShards and shard can't be used at the same time"
            raise ShardConfigError(msg)
        super().validate(suite)

    def filter_files(self, suite: Suite, root_dir: str | Path, files: list[str]) -> list[str]:
        if not suite.shard_grep_enabled or not (suite.grep_title or suite.grep_invert):
            return files

        expression = "; ".join(
            part
            for part in (
                f"grep={suite.grep_title}" if suite.grep_title else "",
                f"grepInvert={suite.grep_invert}" if suite.grep_invert else "",
            )
            if part
        )
        matcher = partial(
            playwright_grep.match_files,
            root_dir,
            grep=suite.grep_title,
            grep_invert=suite.grep_invert,
        )
        return self.apply_filter(suite, files, expression, matcher)
