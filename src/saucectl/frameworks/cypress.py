"""Cypress suites: shell-pattern specs filtered by ``@cypress/grep``."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from saucectl.filters import cypress_grep
from saucectl.frameworks.base import Sharder

if TYPE_CHECKING:
    from pathlib import Path

    from saucectl.models.suite import Suite


class CypressSharder(Sharder):
    """Shards ``config.specPattern`` and honours ``env.grep``/``env.grepTags``."""

    frameworks = ("cypress",)

    def filter_files(self, suite: Suite, root_dir: str | Path, files: list[str]) -> list[str]:
        if not suite.shard_grep_enabled or not (suite.grep_title or suite.grep_tags):
            return files

        expression = "; ".join(
            part
            for part in (
                f"grep={suite.grep_title}" if suite.grep_title else "",
                f"grepTags={suite.grep_tags}" if suite.grep_tags else "",
            )
            if part
        )
        matcher = partial(
            cypress_grep.match_files,
            root_dir,
            title=suite.grep_title,
            tags=suite.grep_tags,
        )
        return self.apply_filter(suite, files, expression, matcher)
