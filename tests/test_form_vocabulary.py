"""Tests for the English-to-Dutch team vocabulary."""

from __future__ import annotations

import pytest

from src.form.schema import Language
from src.form.vocabulary import UNKNOWN_TERM, translate_level, translate_team, translate_type


@pytest.mark.parametrize(
    ("value", "expected"),
    [("Men", "Heren"), ("Women", "Dames"), ("Mixed", UNKNOWN_TERM), ("", UNKNOWN_TERM)],
)
def test_english_team_types(value: str, expected: str) -> None:
    assert translate_type(value, Language.en) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("National", "Bond 2"),
        ("Regional High", "Regio 1"),
        ("Regional Low", "Regio 3-4"),
        ("national", UNKNOWN_TERM),
        ("", UNKNOWN_TERM),
    ],
)
def test_english_team_levels(value: str, expected: str) -> None:
    assert translate_level(value, Language.en) == expected


@pytest.mark.parametrize("value", ["Men", "Heren", "Regio 1", "", "anything"])
def test_dutch_terms_pass_through(value: str) -> None:
    assert translate_type(value, Language.nl) == value
    assert translate_level(value, Language.nl) == value


def test_translate_team_keeps_name() -> None:
    team = translate_team("U16", "Women", "Regional High", Language.en)

    assert (team.name, team.type, team.level) == ("U16", "Dames", "Regio 1")
