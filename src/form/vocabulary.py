"""English-to-Dutch vocabulary for team type and level.

The club administration works with the Dutch terms only, so English form answers are mapped onto
them. Values outside the mapping become `UNKNOWN_TERM` so that they stand out during review.
"""

from __future__ import annotations

from src.form.schema import Language, Team

UNKNOWN_TERM = "Onbekend, check registration-handler"

TEAM_TYPES_EN: dict[str, str] = {
    "Men": "Heren",
    "Women": "Dames",
}

TEAM_LEVELS_EN: dict[str, str] = {
    "National": "Bond 2",
    "Regional High": "Regio 1",
    "Regional Low": "Regio 3-4",
}


def translate_type(value: str, language: Language) -> str:
    """Return the Dutch team type for a form answer in `language`."""

    if language == Language.nl:
        return value
    return TEAM_TYPES_EN.get(value, UNKNOWN_TERM)


def translate_level(value: str, language: Language) -> str:
    """Return the Dutch team level for a form answer in `language`."""

    if language == Language.nl:
        return value
    return TEAM_LEVELS_EN.get(value, UNKNOWN_TERM)


def translate_team(name: str, type_: str, level: str, language: Language) -> Team:
    return Team(
        name=name,
        type=translate_type(type_, language),
        level=translate_level(level, language),
    )
