"""Data models shared across saucectl."""

from saucectl.models.suite import ShardMode, Suite

__all__ = ["ShardMode", "Suite"]
