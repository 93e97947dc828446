"""saucectl CLI: top-level command group."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markup import escape

from saucectl import __version__
from saucectl.config import DEFAULT_CONFIG_PATH, ConfigError, load_project, validate_project
from saucectl.filters import cucumber_tags, cypress_grep, playwright_grep
from saucectl.reporters.terminal import reporter
from saucectl.sharding.errors import ShardingError
from saucectl.sharding.sharder import filter_suites, shard_opts, shard_suites, shard_types
from saucectl.sharding.splitter import bin_pack

logger = logging.getLogger(__name__)
console = Console()

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

_MATCH_FRAMEWORKS = ("cypress", "playwright", "cucumber")


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
@click.version_option(version=__version__, prog_name="saucectl")
@click.pass_context
def cli(ctx: click.Context, *, verbose: bool) -> None:
    """saucectl: shard test suites for parallel runs on Sauce Labs."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=_LOG_FORMAT)


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    default=str(DEFAULT_CONFIG_PATH),
    show_default=True,
    type=click.Path(dir_okay=False),
    help="Project config file.",
)
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    default=None,
    help="Override sauce.concurrency from the config.",
)
@click.option("--select-suite", default=None, help="Only shard the suite with this name.")
@click.option("--json-output", "as_json", is_flag=True, help="Output raw JSON instead of tables.")
def shard(
    config_path: str,
    concurrency: int | None,
    select_suite: str | None,
    *,
    as_json: bool,
) -> None:
    """Resolve, filter and split the project's suites into replicas.

    Example:
      saucectl shard --config .sauce/config.yml --concurrency 4
    """
    try:
        project = load_project(config_path)
    except ConfigError as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    errors = validate_project(project)
    if errors:
        reporter.print_error(f"Found {len(errors)} configuration error(s):")
        for idx, error in enumerate(errors, start=1):
            console.print(f"  {idx}. [red]{escape(error)}[/red]")
        raise click.Abort

    suites = project.suites
    effective_concurrency = concurrency or project.sauce.concurrency
    try:
        if select_suite:
            suites = filter_suites(suites, select_suite)
        replicas = shard_suites(suites, project.root_dir, effective_concurrency)
    except ShardingError as e:
        reporter.print_error(str(e))
        raise click.Abort from e

    if as_json:
        _echo_json(
            {
                "kind": project.kind,
                "root_dir": project.root_dir,
                "concurrency": effective_concurrency,
                "shard_types": shard_types(suites),
                "shard_opts": shard_opts(suites),
                "suites": [asdict(s) for s in replicas],
            }
        )
        return

    reporter.print_header(f"{project.kind} project ({project.path})")
    reporter.print_suites(replicas)


@cli.command()
@click.option(
    "--framework",
    "-f",
    required=True,
    type=click.Choice(_MATCH_FRAMEWORKS, case_sensitive=False),
    help="Which framework's filter semantics to apply.",
)
@click.argument("files", nargs=-1, required=True)
@click.option(
    "--root",
    default=".",
    type=click.Path(exists=True, file_okay=False),
    help="Directory FILES are relative to.",
)
@click.option("--grep", default="", help="cypress-grep title expression or Playwright grep regex.")
@click.option("--grep-tags", default="", help="cypress-grep tag expression.")
@click.option("--grep-invert", default="", help="Playwright grepInvert regex.")
@click.option("--tags", "-t", multiple=True, help="Cucumber tag expression (repeatable).")
@click.option("--json-output", "as_json", is_flag=True, help="Output raw JSON.")
def match(
    framework: str,
    files: tuple[str, ...],
    root: str,
    grep: str,
    grep_tags: str,
    grep_invert: str,
    tags: tuple[str, ...],
    *,
    as_json: bool,
) -> None:
    """Show which FILES a grep or tag filter keeps.

    Example:
      saucectl match -f cypress --grep-tags "@smoke" cypress/e2e/login.cy.js
    """
    file_list = list(files)
    framework = framework.lower()
    if framework == "cypress":
        matched, unmatched = cypress_grep.match_files(root, file_list, title=grep, tags=grep_tags)
    elif framework == "playwright":
        matched, unmatched = playwright_grep.match_files(
            root, file_list, grep=grep, grep_invert=grep_invert
        )
    else:
        expression = cucumber_tags.combine_tags(list(tags))
        matched, unmatched = cucumber_tags.match_files(root, file_list, tag_expression=expression)

    if as_json:
        _echo_json({"matched": matched, "unmatched": unmatched})
        return

    reporter.print_match_result(matched, unmatched)


@cli.command()
@click.argument("items_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--concurrency",
    "-n",
    required=True,
    type=int,
    help="Number of groups to split into.",
)
@click.option("--json-output", "as_json", is_flag=True, help="Output raw JSON.")
def split(items_file: str, concurrency: int, *, as_json: bool) -> None:
    """Split the non-blank lines of ITEMS_FILE into balanced groups.

    Example:
      saucectl split tests.txt --concurrency 3
    """
    try:
        text = Path(items_file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        reporter.print_error(f"Failed to read {items_file}: {e}")
        raise click.Abort from e

    items = [line.strip() for line in text.splitlines() if line.strip()]
    if not items:
        reporter.print_warning(f"{items_file} has no items")
        return

    groups = bin_pack(items, concurrency)
    logger.debug("Split %d items into %d groups", len(items), len(groups))

    if as_json:
        _echo_json(groups)
        return

    reporter.print_groups(groups)
