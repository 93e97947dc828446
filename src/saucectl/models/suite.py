"""Framework-neutral suite model consumed by the sharder."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ShardMode(str, Enum):
    """How a suite is split into replicas. Values are the config spellings."""

    NONE = ""
    BY_FILE = "spec"
    BY_CONCURRENCY = "concurrency"
    BY_SCENARIO = "scenario"
    BY_TEST_LIST = "testList"

    @classmethod
    def parse(cls, value: str | None) -> ShardMode:
        """Return the mode for a config value, raising ``ValueError`` if unknown."""
        raw = (value or "").strip()
        for mode in cls:
            if mode.value == raw:
                return mode
        allowed = ", ".join(repr(m.value) for m in cls if m.value)
        msg = f"unknown shard type {raw!r}; expected one of {allowed}"
        raise ValueError(msg)


@dataclass
class Suite:
    """A test suite as configured in the project file.

    Replicas produced by sharding are copies made with
    ``dataclasses.replace``; only ``name`` and the selection field
    (``file_patterns``, ``test_names``, ``scenario_name`` or
    ``shard_index``) differ from the original.
    """

    name: str
    framework: str = ""

    file_patterns: list[str] = field(default_factory=list)
    """Patterns selecting spec files, relative to the project root."""

    exclude_patterns: list[str] = field(default_factory=list)
    """Patterns for files removed from the matched set."""

    shard: ShardMode = ShardMode.NONE

    grep_title: str = ""
    """cypress-grep title expression, or Playwright ``grep`` pattern."""

    grep_tags: str = ""
    """cypress-grep tag expression."""

    grep_invert: str = ""
    """Playwright ``grepInvert`` pattern."""

    shard_grep_enabled: bool = False
    """Drop files whose tests do not match the grep settings before sharding."""

    tags: list[str] = field(default_factory=list)
    """Cucumber tag expressions; all of them must hold."""

    shard_tags_enabled: bool = False
    """Drop feature files without a scenario matching ``tags`` before sharding."""

    scenario_name: str = ""
    """Cucumber ``--name`` filter; set per replica by scenario sharding."""

    test_list_file: str = ""
    """Text file with one test (class or method) per line."""

    test_names: list[str] = field(default_factory=list)
    """Tests selected for this suite, read from ``test_list_file`` when sharded."""

    num_shards: int = 0
    """Runner-side shard count (Playwright ``numShards``, Espresso ``testOptions.numShards``)."""

    shard_index: int | None = None
    """Zero-based index of this replica when ``num_shards`` is set."""

    options: dict[str, Any] = field(default_factory=dict)
    """Remaining framework settings, carried over to replicas untouched."""

    @property
    def is_sharded(self) -> bool:
        return self.shard is not ShardMode.NONE or self.num_shards > 1
