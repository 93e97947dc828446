"""Per-framework sharding strategies and their lookup table."""

from __future__ import annotations

from types import MappingProxyType

from saucectl.frameworks.base import Sharder
from saucectl.frameworks.cucumber import CucumberSharder
from saucectl.frameworks.cypress import CypressSharder
from saucectl.frameworks.espresso import EspressoSharder
from saucectl.frameworks.playwright import PlaywrightSharder
from saucectl.frameworks.testcafe import TestCafeSharder
from saucectl.frameworks.xcuitest import XCUITestSharder
from saucectl.sharding.errors import ShardConfigError

_SHARDER_TYPES: tuple[type[Sharder], ...] = (
    CypressSharder,
    PlaywrightSharder,
    TestCafeSharder,
    CucumberSharder,
    XCUITestSharder,
    EspressoSharder,
)

SHARDERS = MappingProxyType(
    {framework: cls() for cls in _SHARDER_TYPES for framework in cls.frameworks}
)
"""Sharder instance per project ``kind``."""


def get_sharder(framework: str) -> Sharder:
    """Return the sharder for *framework* (case-insensitive).

    Raises:
        ShardConfigError: If the framework has no sharder.
    """
    try:
        return SHARDERS[framework.strip().lower()]
    except KeyError:
        supported = ", ".join(sorted(SHARDERS))
        msg = f"unsupported framework {framework!r}; expected one of {supported}"
        raise ShardConfigError(msg) from None


__all__ = [
    "SHARDERS",
    "CucumberSharder",
    "CypressSharder",
    "EspressoSharder",
    "PlaywrightSharder",
    "Sharder",
    "TestCafeSharder",
    "XCUITestSharder",
    "get_sharder",
]
