"""Scenario names and effective tags of Gherkin features.

Features are parsed with the official Cucumber Gherkin parser and compiled
into pickles, so localised keywords (``# language:``), keyword synonyms,
rules, backgrounds and outline examples behave exactly as they do when
Cucumber runs the suite.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from gherkin.errors import ParserError
from gherkin.parser import Parser
from gherkin.pickles.compiler import Compiler

logger = logging.getLogger(__name__)


class GherkinParseError(Exception):
    """The document is not a valid Gherkin feature."""


@dataclass(frozen=True)
class Scenario:
    """One executable scenario (a compiled pickle)."""

    name: str
    tags: list[str] = field(default_factory=list)
    uri: str = ""


def parse_feature(text: str, uri: str = "") -> list[Scenario]:
    """Return the scenarios the feature document *text* compiles to.

    Outline names come back with their ``<placeholder>`` values filled in,
    one scenario per examples row. Tags are inherited from the feature,
    rule and examples block.

    Raises:
        GherkinParseError: If the document is not valid Gherkin.
    """
    try:
        document = Parser().parse(text)
    except ParserError as exc:
        msg = f"{uri or '<string>'}: {exc}"
        raise GherkinParseError(msg) from exc

    document["uri"] = uri
    return [
        Scenario(
            name=pickle["name"],
            tags=[tag["name"] for tag in pickle["tags"]],
            uri=uri,
        )
        for pickle in Compiler().compile(document)
    ]


def list_scenarios(root_dir: str | Path, files: list[str]) -> list[Scenario]:
    """Parse *files* (relative to *root_dir*) and return all their scenarios.

    Files that cannot be read or parsed are logged and left out.
    """
    root = Path(root_dir)
    scenarios: list[Scenario] = []
    for f in files:
        try:
            text = (root / f).read_text(encoding="utf-8")
            scenarios.extend(parse_feature(text, uri=f))
        except (OSError, UnicodeDecodeError, GherkinParseError) as exc:
            logger.warning(
                "Could not parse %s. It will be excluded from sharded execution: %s", f, exc
            )
    return scenarios


def unique_names(scenarios: list[Scenario]) -> list[str]:
    """Return scenario names without duplicates, in first-seen order."""
    return list(dict.fromkeys(s.name for s in scenarios))
