"""Tests for config.py: .sauce/config.yml parsing and validation."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest
import yaml

from saucectl.config import (
    ConfigError,
    Project,
    SauceConfig,
    _resolve_dict,
    _resolve_env_vars,
    load_project,
    validate_project,
)
from saucectl.models.suite import ShardMode, Suite

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[dict[str, Any]], Path]:
    def _write(data: dict[str, Any]) -> Path:
        path = tmp_path / ".sauce" / "config.yml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.dump(data), encoding="utf-8")
        return path

    return _write


# ── _resolve_env_vars / _resolve_dict ─────────────────────────────────


class TestResolveEnvVars:
    def test_resolves_existing_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_VAR", "hello")
        assert _resolve_env_vars("${MY_VAR}") == "hello"

    def test_missing_var_returns_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MISSING_VAR", raising=False)
        assert _resolve_env_vars("${MISSING_VAR}") == ""

    def test_no_vars_unchanged(self) -> None:
        assert _resolve_env_vars("plain text") == "plain text"

    def test_nested_structures(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GREP", "@smoke")
        data = {"suites": [{"config": {"env": {"grepTags": "${GREP}"}}}], "count": 3}
        assert _resolve_dict(data) == {
            "suites": [{"config": {"env": {"grepTags": "@smoke"}}}],
            "count": 3,
        }


# ── load_project ───────────────────────────────────────────────────


class TestLoadProject:
    def test_cypress_project(self, write_config: Callable[[dict[str, Any]], Path]) -> None:
        path = write_config(
            {
                "apiVersion": "v1alpha",
                "kind": "cypress",
                "rootDir": "e2e-project",
                "sauce": {"concurrency": 4, "region": "us-west-1"},
                "suites": [
                    {
                        "name": "chrome",
                        "browser": "chrome",
                        "shard": "spec",
                        "shardGrepEnabled": True,
                        "config": {
                            "specPattern": ["cypress/e2e/**/*.cy.js"],
                            "excludeSpecPattern": "cypress/e2e/skip/*",
                            "env": {"grep": "login", "grepTags": "@smoke"},
                        },
                    }
                ],
            }
        )
        project = load_project(path)
        assert project.kind == "cypress"
        assert project.root_dir == "e2e-project"
        assert project.sauce == SauceConfig(concurrency=4, region="us-west-1")
        assert project.path == str(path)

        suite = project.suites[0]
        assert suite.name == "chrome"
        assert suite.framework == "cypress"
        assert suite.shard is ShardMode.BY_FILE
        assert suite.file_patterns == ["cypress/e2e/**/*.cy.js"]
        assert suite.exclude_patterns == ["cypress/e2e/skip/*"]
        assert suite.grep_title == "login"
        assert suite.grep_tags == "@smoke"
        assert suite.shard_grep_enabled is True
        assert suite.options["browser"] == "chrome"
        assert "shard" not in suite.options

    def test_playwright_project(self, write_config: Callable[[dict[str, Any]], Path]) -> None:
        path = write_config(
            {
                "kind": "playwright",
                "suites": [
                    {
                        "name": "pw",
                        "testMatch": [".*.spec.js"],
                        "excludedTestFiles": ["slow.spec.js"],
                        "numShards": 3,
                        "params": {"grep": "@fast", "grepInvert": "@flaky"},
                    }
                ],
            }
        )
        suite = load_project(path).suites[0]
        assert suite.file_patterns == [".*.spec.js"]
        assert suite.exclude_patterns == ["slow.spec.js"]
        assert suite.num_shards == 3
        assert suite.grep_title == "@fast"
        assert suite.grep_invert == "@flaky"

    def test_testcafe_project(self, write_config: Callable[[dict[str, Any]], Path]) -> None:
        path = write_config(
            {
                "kind": "testcafe",
                "suites": [{"name": "cafe", "src": "tests/*.js", "shard": "concurrency"}],
            }
        )
        suite = load_project(path).suites[0]
        assert suite.file_patterns == ["tests/*.js"]
        assert suite.shard is ShardMode.BY_CONCURRENCY

    def test_cucumber_project(self, write_config: Callable[[dict[str, Any]], Path]) -> None:
        path = write_config(
            {
                "kind": "playwright-cucumberjs",
                "suites": [
                    {
                        "name": "bdd",
                        "shard": "scenario",
                        "shardTagsEnabled": True,
                        "options": {
                            "paths": ["features/**/*.feature"],
                            "excludedTestFiles": ["features/wip/*"],
                            "tags": ["@smoke", "not @slow"],
                        },
                    }
                ],
            }
        )
        suite = load_project(path).suites[0]
        assert suite.shard is ShardMode.BY_SCENARIO
        assert suite.file_patterns == ["features/**/*.feature"]
        assert suite.exclude_patterns == ["features/wip/*"]
        assert suite.tags == ["@smoke", "not @slow"]
        assert suite.shard_tags_enabled is True

    def test_xcuitest_and_espresso(self, write_config: Callable[[dict[str, Any]], Path]) -> None:
        path = write_config(
            {
                "kind": "xcuitest",
                "suites": [{"name": "ios", "shard": "testList", "testListFile": "tests.txt"}],
            }
        )
        assert load_project(path).suites[0].test_list_file == "tests.txt"

        path = write_config(
            {
                "kind": "espresso",
                "suites": [{"name": "android", "testOptions": {"numShards": 4}}],
            }
        )
        assert load_project(path).suites[0].num_shards == 4

    def test_env_placeholders(
        self,
        write_config: Callable[[dict[str, Any]], Path],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("SPEC_DIR", "cypress/e2e")
        path = write_config(
            {
                "kind": "cypress",
                "suites": [{"name": "s", "config": {"specPattern": "${SPEC_DIR}/*.js"}}],
            }
        )
        assert load_project(path).suites[0].file_patterns == ["cypress/e2e/*.js"]

    def test_concurrency_env_override(
        self,
        write_config: Callable[[dict[str, Any]], Path],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("SAUCE_CONCURRENCY", "7")
        path = write_config({"kind": "cypress", "sauce": {"concurrency": 2}, "suites": []})
        assert load_project(path).sauce.concurrency == 7

    def test_concurrency_defaults(
        self,
        write_config: Callable[[dict[str, Any]], Path],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.delenv("SAUCE_CONCURRENCY", raising=False)
        path = write_config({"kind": "cypress", "suites": []})
        project = load_project(path)
        assert project.sauce.concurrency == 2
        assert project.root_dir == "."

    def test_unnamed_suite_gets_index_name(
        self, write_config: Callable[[dict[str, Any]], Path]
    ) -> None:
        path = write_config({"kind": "testcafe", "suites": [{"src": "a.js"}, {"src": "b.js"}]})
        assert [s.name for s in load_project(path).suites] == ["suite 1", "suite 2"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="failed to locate project config"):
            load_project(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text("kind: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="failed to parse project config"):
            load_project(path)

    def test_invalid_shard_type(self, write_config: Callable[[dict[str, Any]], Path]) -> None:
        path = write_config({"kind": "cypress", "suites": [{"name": "s", "shard": "files"}]})
        with pytest.raises(ConfigError, match="suite 's': unknown shard type"):
            load_project(path)

    def test_invalid_num_shards(self, write_config: Callable[[dict[str, Any]], Path]) -> None:
        path = write_config(
            {"kind": "playwright", "suites": [{"name": "s", "numShards": "many"}]}
        )
        with pytest.raises(ConfigError, match="numShards must be an integer"):
            load_project(path)

    def test_accepts_path_string(self, write_config: Callable[[dict[str, Any]], Path]) -> None:
        path = write_config({"kind": "cypress", "suites": []})
        assert isinstance(load_project(str(path)), Project)


# ── validate_project ───────────────────────────────────────────────


class TestValidateProject:
    def test_valid_project(self) -> None:
        project = Project(
            kind="cypress",
            suites=[
                Suite(
                    name="s",
                    framework="cypress",
                    file_patterns=["*.js"],
                    shard=ShardMode.BY_FILE,
                )
            ],
        )
        assert validate_project(project) == []

    def test_missing_kind_and_suites(self) -> None:
        errors = validate_project(Project(kind=""))
        assert "kind is required" in errors
        assert "no suites defined" in errors

    def test_unknown_kind(self) -> None:
        errors = validate_project(Project(kind="selenium", suites=[Suite(name="s")]))
        assert any("kind must be one of" in e for e in errors)

    def test_duplicate_suite_names(self) -> None:
        project = Project(kind="testcafe", suites=[Suite(name="s"), Suite(name="s")])
        assert "suite name 's' is used more than once" in validate_project(project)

    def test_unsupported_shard_mode(self) -> None:
        project = Project(
            kind="espresso",
            suites=[Suite(name="s", shard=ShardMode.BY_FILE)],
        )
        errors = validate_project(project)
        assert "suite 's': shard type 'spec' is not supported for espresso" in errors

    def test_sharded_suite_without_patterns(self) -> None:
        project = Project(
            kind="cypress",
            suites=[Suite(name="s", shard=ShardMode.BY_CONCURRENCY)],
        )
        assert "suite 's': no test file patterns configured" in validate_project(project)

    def test_test_list_required(self) -> None:
        project = Project(
            kind="xcuitest",
            suites=[Suite(name="ios", shard=ShardMode.BY_TEST_LIST)],
        )
        assert "suite 'ios': testListFile is required for sharding" in validate_project(project)

    def test_negative_num_shards(self) -> None:
        project = Project(kind="playwright", suites=[Suite(name="s", num_shards=-1)])
        assert "suite 's': numShards must not be negative" in validate_project(project)
