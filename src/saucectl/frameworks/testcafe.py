"""TestCafe suites: shell-pattern ``src`` entries without extra filtering."""

from __future__ import annotations

from saucectl.frameworks.base import Sharder


class TestCafeSharder(Sharder):
    """Shards ``src`` patterns by file or by concurrency, without a filter."""

    frameworks = ("testcafe",)
