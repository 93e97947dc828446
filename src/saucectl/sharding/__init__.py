"""File resolution and splitting shared by all framework sharders.

``saucectl.sharding.sharder`` is the entry point; it is not imported here
because the framework sharders depend on this package.
"""

from saucectl.sharding.errors import (
    NoMatchError,
    NoMatchingTestsError,
    PatternResolutionError,
    ShardConfigError,
    ShardingError,
)
from saucectl.sharding.resolver import exclude_files, find_files, resolve
from saucectl.sharding.splitter import bin_pack, clamp_concurrency, split_into_shards

__all__ = [
    "NoMatchError",
    "NoMatchingTestsError",
    "PatternResolutionError",
    "ShardConfigError",
    "ShardingError",
    "bin_pack",
    "clamp_concurrency",
    "exclude_files",
    "find_files",
    "resolve",
    "split_into_shards",
]
