"""Tests for saucectl.filters.playwright_grep."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from saucectl.filters.playwright_grep import compile_patterns, match_files

if TYPE_CHECKING:
    from pathlib import Path

_DEMO_TODO = """
test.describe('New Todo', () => {
  test('should allow me to add todo items @query', async ({ page }) => {
  });

  test('should allow me to add multiple todo items @save', async ({ page }) => {
  });
});
"""

_DEMO_STEP = """
test.describe('New Step', () => {
  test('should allow me to add one step @fast @unique', async ({ page }) => {
  });

  test('should allow me to add multiple steps @slow @unique', async ({ page }) => {
  });
});
"""

_TODO = "demo-todo.spec.js"
_STEP = "demo-step.spec.js"
_FILES = [_TODO, _STEP]


@pytest.fixture
def specs(tmp_path: Path) -> Path:
    (tmp_path / _TODO).write_text(_DEMO_TODO, encoding="utf-8")
    (tmp_path / _STEP).write_text(_DEMO_STEP, encoding="utf-8")
    return tmp_path


class TestCompilePatterns:
    def test_empty_patterns_are_none(self) -> None:
        assert compile_patterns("", "") == (None, None)

    def test_valid_patterns_compile(self) -> None:
        grep_re, invert_re = compile_patterns("@fast", "@slow")
        assert grep_re is not None
        assert grep_re.pattern == "@fast"
        assert invert_re is not None
        assert invert_re.pattern == "@slow"

    def test_invalid_pattern_is_dropped(self, caplog: pytest.LogCaptureFixture) -> None:
        grep_re, invert_re = compile_patterns("(unclosed", "")
        assert grep_re is None
        assert invert_re is None
        assert "Invalid grep pattern" in caplog.text


class TestMatchFiles:
    @pytest.mark.parametrize(
        ("grep", "grep_invert", "want_matched", "want_unmatched"),
        [
            ("New Todo", "", [_TODO], [_STEP]),
            ("@fast", "", [_STEP], [_TODO]),
            ("demo-step", "", [_STEP], [_TODO]),
            ("@fast|@slow", "", [_STEP], [_TODO]),
            ("@fast|@save", "", [_TODO, _STEP], []),
            ("(.*@fast)(.*)(.*@slow)", "", [], [_TODO, _STEP]),
            ("(.*@fast)(.*)(.*@unique)", "", [_STEP], [_TODO]),
            ("(?=.*@fast)(?=.*@unique)", "", [_STEP], [_TODO]),
            ("New Todo", "demo-todo", [], [_TODO, _STEP]),
        ],
        ids=[
            "base",
            "tag",
            "filename",
            "tags-same-spec",
            "tags-across-specs",
            "combined-tag-not-found",
            "combined-tag",
            "lookahead",
            "grep-invert",
        ],
    )
    def test_matching(
        self,
        specs: Path,
        grep: str,
        grep_invert: str,
        want_matched: list[str],
        want_unmatched: list[str],
    ) -> None:
        matched, unmatched = match_files(specs, _FILES, grep, grep_invert)
        assert matched == want_matched
        assert unmatched == want_unmatched
        assert len(matched) + len(unmatched) == len(_FILES)

    def test_invert_on_filename_match(self, specs: Path) -> None:
        matched, unmatched = match_files(specs, _FILES, "demo", "step")
        assert matched == [_TODO]
        assert unmatched == [_STEP]

    def test_invalid_regex_matches_everything(self, specs: Path) -> None:
        matched, unmatched = match_files(specs, _FILES, "(unclosed", "")
        assert matched == _FILES
        assert unmatched == []

    def test_no_pattern_matches_everything(self, specs: Path) -> None:
        assert match_files(specs, _FILES, "", "") == (_FILES, [])

    def test_tag_detail_is_searchable(self, tmp_path: Path) -> None:
        (tmp_path / "tagged.spec.ts").write_text(
            "test('checkout', { tag: ['@payments', '@slow'] }, async ({ page }) => {\n});\n",
            encoding="utf-8",
        )
        matched, _ = match_files(tmp_path, ["tagged.spec.ts"], "@payments", "")
        assert matched == ["tagged.spec.ts"]

    def test_unreadable_file_is_unmatched(self, specs: Path) -> None:
        matched, unmatched = match_files(specs, ["gone.spec.js", _STEP], "@fast", "")
        assert matched == [_STEP]
        assert unmatched == ["gone.spec.js"]
