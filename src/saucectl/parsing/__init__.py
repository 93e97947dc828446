"""Lightweight source scanners for JavaScript specs and Gherkin features."""
