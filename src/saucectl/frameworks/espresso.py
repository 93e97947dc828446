"""Espresso suites: runner-side sharding through ``testOptions.numShards``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from saucectl.frameworks.base import Sharder
from saucectl.models.suite import ShardMode

if TYPE_CHECKING:
    from pathlib import Path

    from saucectl.models.suite import Suite


class EspressoSharder(Sharder):
    """Fans a suite out into ``numShards`` replicas, one per shard index."""

    frameworks = ("espresso",)
    supported_modes = frozenset({ShardMode.NONE})

    def shard(
        self,
        suite: Suite,
        root_dir: str | Path,  # noqa: ARG002
        concurrency: int,  # noqa: ARG002
    ) -> list[Suite]:
        self.validate(suite)
        if suite.num_shards > 1:
            return self.split_by_index(suite, "{name} - {index}/{total}")
        return [suite]
