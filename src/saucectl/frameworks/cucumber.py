"""Cucumber suites: feature files, tag expressions and per-scenario shards."""

from __future__ import annotations

import re
from functools import partial
from typing import TYPE_CHECKING

from saucectl.filters import cucumber_tags
from saucectl.frameworks.base import Sharder
from saucectl.models.suite import ShardMode
from saucectl.parsing.gherkin import list_scenarios, unique_names
from saucectl.sharding.errors import ShardConfigError

if TYPE_CHECKING:
    from pathlib import Path

    from saucectl.models.suite import Suite


class CucumberSharder(Sharder):
    """Shards ``options.paths`` and filters by ``options.tags``.

    Scenario sharding creates one replica per distinct scenario name. The
    replica runs only the feature files declaring that scenario and selects
    it with an anchored ``--name`` pattern.
    """

    frameworks = ("playwright-cucumberjs", "cucumber")
    supported_modes = Sharder.supported_modes | {ShardMode.BY_SCENARIO}

    def filter_files(self, suite: Suite, root_dir: str | Path, files: list[str]) -> list[str]:
        expression = cucumber_tags.combine_tags(suite.tags)
        if not suite.shard_tags_enabled or not expression:
            return files

        matcher = partial(cucumber_tags.match_files, root_dir, tag_expression=expression)
        return self.apply_filter(suite, files, expression, matcher)

    def split(
        self,
        suite: Suite,
        root_dir: str | Path,
        files: list[str],
        concurrency: int,
    ) -> list[Suite]:
        if suite.shard is not ShardMode.BY_SCENARIO:
            return super().split(suite, root_dir, files, concurrency)

        scenarios = list_scenarios(root_dir, files)
        names = unique_names(scenarios)
        if not names:
            msg = f"suite '{suite.name}': no scenarios found in {files}"
            raise ShardConfigError(msg)

        replicas = []
        for name in names:
            uris = list(dict.fromkeys(s.uri for s in scenarios if s.name == name))
            replica = self.replicate(suite, f"{suite.name} - {name}", uris)
            replica.scenario_name = f"^{re.escape(name)}$"
            replicas.append(replica)
        return replicas
