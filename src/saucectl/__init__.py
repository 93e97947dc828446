"""saucectl: test-file sharding and tag/grep filtering for Sauce Labs cloud runs."""

__version__ = "0.1.0"
