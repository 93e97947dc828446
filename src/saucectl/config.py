"""Project configuration parsing from ``.sauce/config.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from saucectl.frameworks import SHARDERS
from saucectl.models.suite import ShardMode, Suite

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(".sauce") / "config.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

_DEFAULT_CONCURRENCY = 2

_CONCURRENCY_ENV = "SAUCE_CONCURRENCY"

_TEST_LIST_KINDS = frozenset({"xcuitest", "xctest"})

_FILE_SHARD_MODES = frozenset({ShardMode.BY_FILE, ShardMode.BY_CONCURRENCY, ShardMode.BY_SCENARIO})

# Keys mapped onto Suite fields; everything else lands in Suite.options.
_SUITE_KEYS = frozenset(
    {
        "name",
        "shard",
        "shardGrepEnabled",
        "shardTagsEnabled",
        "testMatch",
        "excludedTestFiles",
        "src",
        "numShards",
        "testListFile",
    }
)


class ConfigError(Exception):
    """The project file cannot be read or describes an unusable project."""


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_value(value: Any) -> Any:
    if isinstance(value, str):
        return _resolve_env_vars(value)
    if isinstance(value, dict):
        return _resolve_dict(value)
    if isinstance(value, list):
        return [_resolve_value(item) for item in value]
    return value


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    return {key: _resolve_value(value) for key, value in data.items()}


@dataclass
class SauceConfig:
    """The ``sauce`` section."""

    concurrency: int = _DEFAULT_CONCURRENCY
    """Number of jobs run in parallel; also the byConcurrency shard count."""

    region: str = ""
    """Sauce Labs data center (e.g. us-west-1)."""


@dataclass
class Project:
    """A saucectl project: framework kind, root directory and suites."""

    kind: str
    """Framework of every suite (cypress, playwright, testcafe, ...)."""

    root_dir: str = "."
    """Directory the suites' file patterns are relative to."""

    sauce: SauceConfig = field(default_factory=SauceConfig)

    suites: list[Suite] = field(default_factory=list)

    path: str = ""
    """Config file the project was loaded from."""


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key, {})
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[str]:
    """Accept a single string or a list of strings."""
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return [str(v) for v in value if v is not None and str(v) != ""]
    return [str(value)]


def _parse_shard(raw: dict[str, Any], name: str) -> ShardMode:
    try:
        return ShardMode.parse(str(raw.get("shard", "") or ""))
    except ValueError as e:
        msg = f"suite '{name}': {e}"
        raise ConfigError(msg) from e


def _parse_int(value: Any, key: str) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError) as e:
        msg = f"{key} must be an integer (got: {value!r})"
        raise ConfigError(msg) from e


# ── Per-kind suite parsers ───────────────────────────────────────


def _parse_cypress_suite(raw: dict[str, Any], suite: Suite) -> None:
    cfg = _section(raw, "config")
    env = _section(cfg, "env")
    suite.file_patterns = _as_list(cfg.get("specPattern"))
    suite.exclude_patterns = _as_list(cfg.get("excludeSpecPattern"))
    suite.grep_title = str(env.get("grep", "") or "")
    suite.grep_tags = str(env.get("grepTags", "") or "")


def _parse_playwright_suite(raw: dict[str, Any], suite: Suite) -> None:
    params = _section(raw, "params")
    suite.file_patterns = _as_list(raw.get("testMatch"))
    suite.exclude_patterns = _as_list(raw.get("excludedTestFiles"))
    suite.grep_title = str(params.get("grep", "") or "")
    suite.grep_invert = str(params.get("grepInvert", "") or "")
    suite.num_shards = _parse_int(raw.get("numShards"), f"suite '{suite.name}': numShards")


def _parse_testcafe_suite(raw: dict[str, Any], suite: Suite) -> None:
    suite.file_patterns = _as_list(raw.get("src"))
    suite.exclude_patterns = _as_list(raw.get("excludedTestFiles"))


def _parse_cucumber_suite(raw: dict[str, Any], suite: Suite) -> None:
    options = _section(raw, "options")
    suite.file_patterns = _as_list(options.get("paths"))
    suite.exclude_patterns = _as_list(options.get("excludedTestFiles"))
    suite.tags = _as_list(options.get("tags"))
    suite.scenario_name = str(options.get("name", "") or "")


def _parse_xcuitest_suite(raw: dict[str, Any], suite: Suite) -> None:
    suite.test_list_file = str(raw.get("testListFile", "") or "")


def _parse_espresso_suite(raw: dict[str, Any], suite: Suite) -> None:
    test_options = _section(raw, "testOptions")
    suite.num_shards = _parse_int(
        test_options.get("numShards"), f"suite '{suite.name}': testOptions.numShards"
    )


_SUITE_PARSERS = {
    "cypress": _parse_cypress_suite,
    "playwright": _parse_playwright_suite,
    "testcafe": _parse_testcafe_suite,
    "playwright-cucumberjs": _parse_cucumber_suite,
    "cucumber": _parse_cucumber_suite,
    "xcuitest": _parse_xcuitest_suite,
    "xctest": _parse_xcuitest_suite,
    "espresso": _parse_espresso_suite,
}


def _parse_suite(raw: dict[str, Any], kind: str, index: int) -> Suite:
    name = str(raw.get("name", "") or f"suite {index + 1}")
    suite = Suite(
        name=name,
        framework=kind,
        shard=_parse_shard(raw, name),
        shard_grep_enabled=bool(raw.get("shardGrepEnabled", False)),
        shard_tags_enabled=bool(raw.get("shardTagsEnabled", False)),
        options={k: v for k, v in raw.items() if k not in _SUITE_KEYS},
    )
    parser = _SUITE_PARSERS.get(kind)
    if parser is not None:
        parser(raw, suite)
    return suite


def _parse_sauce_config(raw: dict[str, Any]) -> SauceConfig:
    sauce_raw = _section(raw, "sauce")
    concurrency = _parse_int(
        os.environ.get(_CONCURRENCY_ENV) or sauce_raw.get("concurrency"), "sauce.concurrency"
    )
    if concurrency < 1:
        concurrency = _DEFAULT_CONCURRENCY
    return SauceConfig(concurrency=concurrency, region=str(sauce_raw.get("region", "") or ""))


def load_project(path: str | Path = DEFAULT_CONFIG_PATH) -> Project:
    """Load the project file at *path*.

    ``rootDir`` is resolved against the current directory, like the saucectl
    CLI does. ``SAUCE_CONCURRENCY`` overrides ``sauce.concurrency``.

    Raises:
        ConfigError: If the file is missing, is not valid YAML or has
            malformed suite settings.
    """
    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as e:
        msg = f"failed to locate project config: {e}"
        raise ConfigError(msg) from e

    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as e:
        msg = f"failed to parse project config: {e}"
        raise ConfigError(msg) from e

    raw = _resolve_dict(parsed) if isinstance(parsed, dict) else {}
    kind = str(raw.get("kind", "") or "").strip().lower()

    suites_raw = raw.get("suites", [])
    if not isinstance(suites_raw, list):
        suites_raw = []

    project = Project(
        kind=kind,
        root_dir=str(raw.get("rootDir", "") or "."),
        sauce=_parse_sauce_config(raw),
        suites=[
            _parse_suite(s, kind, i) for i, s in enumerate(suites_raw) if isinstance(s, dict)
        ],
        path=str(config_path),
    )
    logger.debug(
        "Loaded %s project with %d suites from %s", kind, len(project.suites), config_path
    )
    return project


def validate_project(project: Project) -> list[str]:
    """Validate the project and return a list of error messages.

    Returns an empty list if the project is valid.
    """
    errors: list[str] = []

    if not project.kind:
        errors.append("kind is required")
    elif project.kind not in SHARDERS:
        supported = ", ".join(sorted(SHARDERS))
        errors.append(f"kind must be one of: {supported} (got: {project.kind})")

    if not project.suites:
        errors.append("no suites defined")

    seen: set[str] = set()
    for suite in project.suites:
        if suite.name in seen:
            errors.append(f"suite name '{suite.name}' is used more than once")
        seen.add(suite.name)

        if suite.num_shards < 0:
            errors.append(f"suite '{suite.name}': numShards must not be negative")

        if project.kind not in SHARDERS:
            continue
        sharder = SHARDERS[project.kind]
        if suite.shard not in sharder.supported_modes:
            errors.append(
                f"suite '{suite.name}': shard type '{suite.shard.value}' is not "
                f"supported for {project.kind}"
            )
        uses_test_list = project.kind in _TEST_LIST_KINDS
        if suite.shard in _FILE_SHARD_MODES and not uses_test_list and not suite.file_patterns:
            errors.append(f"suite '{suite.name}': no test file patterns configured")
        if suite.is_sharded and uses_test_list and not suite.test_list_file:
            errors.append(f"suite '{suite.name}': testListFile is required for sharding")

    return errors
