"""Submission-to-row conversion helpers.

The column order here matches the INSERT statements of the submission writer.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from src.form.schema import Language, Submission, Team


def submission_row(
        submission: Submission,
        *,
        subscription_id: str,
        year: int,
        language: Language,
) -> tuple[Any, ...]:
    """Return the row tuple for inserting into the `inschrijving` table."""

    return (
        subscription_id,
        year,
        submission.name,
        submission.surname,
        submission.email,
        submission.phone,
        submission.club,
        language.value,
        submission.submit_time,
    )


def iter_team_rows(submission_key: int, teams: Sequence[Team]) -> Iterable[tuple[Any, ...]]:
    """Yield row tuples for inserting into the `team` table, all tied to `submission_key`."""

    for team in teams:
        yield submission_key, team.name, team.type, team.level
