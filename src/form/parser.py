"""Form payload parsing.

Turns the flat key/value mapping sent by the form plugin into a validated `Submission`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import UTC, datetime

from src.form.schema import Language, PayloadLayout, Submission, Team
from src.form.vocabulary import translate_team

TITLE_LANGUAGES: dict[str, Language] = {
    "Inschrijven teams": Language.nl,
    "Sign up teams": Language.en,
}

# Read in this order; the first missing key is the one reported.
CONTACT_FIELDS: tuple[tuple[str, str], ...] = (
    ("club", "contact-club"),
    ("name", "contact-name"),
    ("surname", "contact-surname"),
    ("email", "contact-email"),
    ("phone", "contact-phone"),
)

SUBMIT_TIME_FIELD = "submit-time"
_EPOCH_SECONDS_RE = re.compile(r"[+-]?[0-9]+")


class SubmissionParseError(ValueError):
    """Raised when a form payload cannot be turned into a valid submission."""


def detect_language(title: str) -> Language | None:
    """Return the form language for a message title, or `None` for forms we do not handle."""

    return TITLE_LANGUAGES.get(title)


def _require(data: Mapping[str, str], key: str) -> str:
    value = data.get(key, "")
    if not value:
        raise SubmissionParseError(f"Missing required value: {key}")
    return value


def parse_submit_time(value: str) -> datetime:
    """Parse the plugin's `submit-time` value (`<epoch seconds>.<fraction>`) as a UTC datetime.

    Only the integral part is used. It may carry a sign (`+1714560000`, `-5`); anything other than
    ASCII digits after the sign is rejected.
    """

    seconds = value.split(".", 1)[0]
    if not _EPOCH_SECONDS_RE.fullmatch(seconds):
        raise SubmissionParseError(f"Unknown submit time format: {value}")
    try:
        return datetime.fromtimestamp(int(seconds), tz=UTC)
    except (OverflowError, OSError, ValueError) as exc:
        raise SubmissionParseError(f"Unknown submit time format: {value}") from exc


def parse_team(data: Mapping[str, str], language: Language, index: int) -> Team | None:
    """Read team slot `index`; returns `None` when the slot has no team name."""

    name = data.get(f"team{index}-name", "")
    if not name:
        return None

    return translate_team(
        name,
        data.get(f"team{index}-type", ""),
        data.get(f"team{index}-level", ""),
        language,
    )


def parse_submission(
        data: Mapping[str, str],
        language: Language,
        *,
        layout: PayloadLayout | None = None,
) -> Submission:
    """Parse a form payload into a `Submission`.

    Raises:
        SubmissionParseError: On a missing contact field, an unreadable submit time, or when the
            payload holds no team at all.
    """

    layout = layout or PayloadLayout()

    contact = {attr: _require(data, key) for attr, key in CONTACT_FIELDS}

    if layout.submit_time == "payload":
        submit_time = parse_submit_time(_require(data, SUBMIT_TIME_FIELD))
    else:
        submit_time = datetime.now(UTC)

    teams = [
        team
        for team in (parse_team(data, language, i) for i in layout.team_indices)
        if team is not None
    ]
    if not teams:
        raise SubmissionParseError("Subscription contains no teams")

    return Submission(**contact, submit_time=submit_time, teams=teams)
