"""Errors raised while resolving and sharding suites."""

from __future__ import annotations


class ShardingError(Exception):
    """Base class for sharding failures that abort config loading."""


class PatternResolutionError(ShardingError):
    """A file pattern could not be expanded.

    Never propagated out of the resolver: the pattern is skipped with a warning.
    """

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"test file pattern '{pattern}' is not supported: {reason}")


class NoMatchError(ShardingError):
    """Resolving and excluding left no files for a suite that must be sharded."""

    def __init__(self, suite_name: str, root_dir: str, patterns: list[str]) -> None:
        self.suite_name = suite_name
        self.root_dir = root_dir
        self.patterns = patterns
        super().__init__(f"suite '{suite_name}' patterns have no matching files")


class NoMatchingTestsError(ShardingError):
    """Grep or tag filtering removed every file of a suite."""

    def __init__(self, suite_name: str, expression: str) -> None:
        self.suite_name = suite_name
        self.expression = expression
        super().__init__(
            f"suite '{suite_name}': no test files match the configured "
            f"filter expression '{expression}'"
        )


class ShardConfigError(ShardingError):
    """The shard settings of a suite are inconsistent or unusable."""
