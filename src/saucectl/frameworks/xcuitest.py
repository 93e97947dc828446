"""XCUITest/XCTest suites: shards built from a test list file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from saucectl.frameworks.base import Sharder, copy_suite
from saucectl.models.suite import ShardMode
from saucectl.sharding.errors import ShardConfigError
from saucectl.sharding.splitter import bin_pack

if TYPE_CHECKING:
    from saucectl.models.suite import Suite

logger = logging.getLogger(__name__)


class XCUITestSharder(Sharder):
    """Splits the tests listed in ``testListFile`` instead of spec files.

    Each line of the list names a test class or method; blank lines are
    ignored. ``testList`` shards one replica per test, ``concurrency``
    bin-packs the list.
    """

    frameworks = ("xcuitest", "xctest")
    supported_modes = frozenset({ShardMode.NONE, ShardMode.BY_CONCURRENCY, ShardMode.BY_TEST_LIST})

    def shard(self, suite: Suite, root_dir: str | Path, concurrency: int) -> list[Suite]:
        self.validate(suite)
        if suite.shard is ShardMode.NONE:
            return [suite]

        tests = read_test_list(suite, root_dir)
        if suite.shard is ShardMode.BY_TEST_LIST:
            return [
                copy_suite(suite, name=f"{suite.name} - {t}", test_names=[t]) for t in tests
            ]

        groups = bin_pack(tests, concurrency)
        return [
            copy_suite(suite, name=f"{suite.name} - {i}/{len(groups)}", test_names=group)
            for i, group in enumerate(groups, start=1)
        ]


def read_test_list(suite: Suite, root_dir: str | Path) -> list[str]:
    """Return the non-blank lines of the suite's test list file.

    Raises:
        ShardConfigError: If the file is missing, unreadable or lists no tests.
    """
    reason = ""
    tests: list[str] = []
    if not suite.test_list_file:
        reason = "no testListFile configured"
    else:
        try:
            text = (Path(root_dir) / suite.test_list_file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            reason = str(exc)
        else:
            tests = [line.strip() for line in text.splitlines() if line.strip()]
            if not tests:
                reason = "empty file"

    if reason:
        logger.error("Suite '%s' has no usable test list: %s", suite.name, reason)
        msg = f"failed to get tests from testListFile({suite.test_list_file}): {reason}"
        raise ShardConfigError(msg)
    return tests
