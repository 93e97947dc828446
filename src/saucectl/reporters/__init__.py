"""Reporters for outputting sharding results."""

from __future__ import annotations

from saucectl.reporters.terminal import reporter

__all__ = ["reporter"]
