"""Tests for saucectl.filters.cucumber_tags."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from saucectl.filters.cucumber_tags import combine_tags, match_files

if TYPE_CHECKING:
    from pathlib import Path

_SCENARIO1 = """
@act1
Feature: Scenario 1

        @interior @nomatch
        Scenario: Dinner scene
                When Turkey is served
                Then I say "bon appetit!"
"""

_SCENARIO2 = """
@act3
Feature: Scenario 2

        @exterior @nomatch
        Scenario: Exterior scene
                When The character exits the house
                Then The camera pans out to show the exterior

        @interior @nomatch
        Scenario: Interior scene
                When The character enters the house
                Then The character's leitmotif starts
"""

_SCENARIO3 = """
@act3 @credits
Feature: Scenario 3

\t@nomatch
        Scenario: Epilogue
                When The credits reach mid point
                Then Start the first mid-credit scene

\t@nomatch
        Scenario: Last Bonus Scene
                When The credits reach the end
                Then Start the end-credit scene
"""

_FILES = ["scenario1.feature", "scenario2.feature", "scenario3.feature"]


@pytest.fixture
def features(tmp_path: Path) -> Path:
    for name, text in zip(_FILES, (_SCENARIO1, _SCENARIO2, _SCENARIO3), strict=True):
        (tmp_path / name).write_text(text, encoding="utf-8")
    return tmp_path


class TestCombineTags:
    def test_single(self) -> None:
        assert combine_tags(["@smoke"]) == "(@smoke)"

    def test_multiple_are_and_joined(self) -> None:
        assert combine_tags(["@a or @b", "not @c"]) == "(@a or @b) and (not @c)"

    def test_blank_entries_skipped(self) -> None:
        assert combine_tags(["", "  ", "@a"]) == "(@a)"
        assert combine_tags([]) == ""


class TestMatchFiles:
    @pytest.mark.parametrize(
        ("expression", "want_matched", "want_unmatched"),
        [
            ("@act1", ["scenario1.feature"], ["scenario2.feature", "scenario3.feature"]),
            ("@interior", ["scenario1.feature", "scenario2.feature"], ["scenario3.feature"]),
            (
                "@act3 and @credits",
                ["scenario3.feature"],
                ["scenario1.feature", "scenario2.feature"],
            ),
            (
                "@act3 and not @credits",
                ["scenario2.feature"],
                ["scenario1.feature", "scenario3.feature"],
            ),
            ("not @nomatch", [], _FILES),
        ],
    )
    def test_matching(
        self,
        features: Path,
        expression: str,
        want_matched: list[str],
        want_unmatched: list[str],
    ) -> None:
        matched, unmatched = match_files(features, _FILES, expression)
        assert matched == want_matched
        assert unmatched == want_unmatched

    def test_empty_expression_matches_files_with_scenarios(self, features: Path) -> None:
        assert match_files(features, _FILES, "") == (_FILES, [])

    def test_malformed_expression_matches_nothing(
        self, features: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        matched, unmatched = match_files(features, _FILES, "@act1 and")
        assert matched == []
        assert unmatched == _FILES
        assert "could not be parsed" in caplog.text

    def test_invalid_feature_is_unmatched(self, features: Path) -> None:
        (features / "broken.feature").write_text("Scenario: no feature header\n", encoding="utf-8")
        files = ["broken.feature", "scenario1.feature"]
        matched, unmatched = match_files(features, files, "@act1")
        assert matched == ["scenario1.feature"]
        assert unmatched == ["broken.feature"]

    def test_missing_file_is_unmatched(self, features: Path) -> None:
        matched, unmatched = match_files(features, ["nope.feature"], "@act1")
        assert matched == []
        assert unmatched == ["nope.feature"]

    def test_localised_and_synonym_features(self, tmp_path: Path) -> None:
        (tmp_path / "fr.feature").write_text(
            "# language: fr\n@smoke\nFonctionnalité: Panier\n"
            "  Scénario: Ajouter un article\n    Soit un panier vide\n",
            encoding="utf-8",
        )
        (tmp_path / "need.feature").write_text(
            "@smoke\nBusiness Need: Reporting\n"
            "  Scenario: Monthly report\n    Given a month of orders\n",
            encoding="utf-8",
        )
        files = ["fr.feature", "need.feature"]
        assert match_files(tmp_path, files, "@smoke") == (files, [])
