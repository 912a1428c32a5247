"""Form submission models (Pydantic).

`Message` is the contract with the WordPress form plugin: a title plus a flat string-to-string
mapping of form fields. `Submission` and `Team` are the validated domain records the writer
persists.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

TEAM_SLOTS = 5


class Language(StrEnum):
    """Form language; the value is the code stored with the submission."""

    nl = "NL"
    en = "EN"


class Message(BaseModel):
    """A form submission as delivered by the webhook.

    Unknown envelope keys and non-string field values are rejected instead of being coerced.
    """

    model_config = ConfigDict(extra="forbid")

    title: StrictStr
    data: dict[str, StrictStr]


class PayloadLayout(BaseModel):
    """Which variant of the form payload is being received.

    Attributes:
        team_index_base: Index of the first team slot (`team0-*` or `team1-*`).
        submit_time: Take the timestamp from the `submit-time` field, or use the processing time.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    team_index_base: int = Field(default=0, ge=0, le=1)
    submit_time: Literal["payload", "now"] = "payload"

    @property
    def team_indices(self) -> range:
        return range(self.team_index_base, self.team_index_base + TEAM_SLOTS)


class Team(BaseModel):
    """One team entry of a submission, with type and level in the Dutch vocabulary."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    type: str = ""
    level: str = ""


class Submission(BaseModel):
    """A fully validated team registration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    club: str = Field(min_length=1)
    name: str = Field(min_length=1)
    surname: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    submit_time: datetime
    teams: list[Team] = Field(min_length=1)

    @field_validator("submit_time")
    @classmethod
    def validate_submit_time_is_aware(cls, value: datetime) -> datetime:
        """Reject naive timestamps; they would be stored relative to the session timezone."""

        if value.tzinfo is None:
            raise ValueError("submit_time must be timezone-aware")
        return value
