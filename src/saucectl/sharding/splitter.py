"""Round-robin splitting of test files and test names across shards."""

from __future__ import annotations

import logging
from typing import Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConcurrencyReader(Protocol):
    """Source of the concurrency an account is allowed to use."""

    def read_allowed_concurrency(self) -> int: ...


def split_into_shards(
    items: list[T],
    shard_index: int,
    shard_count: int,
) -> list[T]:
    """Return the items assigned to one shard using round-robin assignment.

    Args:
        items: Ordered list of all items (file paths, test names, ...).
        shard_index: Zero-based index of this shard.
        shard_count: Total number of shards.

    Returns:
        Subset of items assigned to this shard, in their original order.

    Raises:
        ValueError: If shard_index or shard_count is invalid.
    """
    if shard_count < 1:
        msg = f"shard_count must be >= 1, got {shard_count}"
        raise ValueError(msg)
    if shard_index < 0 or shard_index >= shard_count:
        msg = f"shard_index must be in [0, {shard_count}), got {shard_index}"
        raise ValueError(msg)
    return [item for i, item in enumerate(items) if i % shard_count == shard_index]


def bin_pack(items: list[T], concurrency: int) -> list[list[T]]:
    """Partition *items* into balanced groups, one per concurrency slot.

    - ``concurrency <= 1`` yields a single group with every item.
    - ``concurrency > len(items)`` is clamped to ``len(items)``.
    - Otherwise item ``i`` lands in group ``i % concurrency``, so group
      sizes differ by at most one and no group is empty.

    The result depends only on the inputs; callers must pass a stably
    ordered list to get reproducible shard names across runs.
    """
    if concurrency <= 1:
        return [list(items)]

    count = min(concurrency, len(items))
    return [split_into_shards(items, i, count) for i in range(count)]


def clamp_concurrency(reader: ConcurrencyReader, requested: int) -> int:
    """Limit *requested* to what the account allows.

    Falls back to a concurrency of 1 when the allowance cannot be read.
    """
    try:
        allowed = reader.read_allowed_concurrency()
    except Exception as exc:
        logger.warning("Unable to read allowed concurrency, defaulting to 1: %s", exc)
        return 1
    return min(requested, allowed)
