"""Environment configuration and validation.

This module defines strongly-typed application settings loaded from environment variables
(optionally via a local `.env` file).

Two switches select the form payload layout: which index the team slots start at and where the
submission timestamp comes from. Both variants exist in deployed versions of the WordPress form.
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.form.schema import PayloadLayout


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The settings are validated at startup so that a misconfigured deployment fails before the
    webhook accepts any submission.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field(alias="DATABASE_URL")
    webhook_secret: str = Field(alias="WEBHOOK_SECRET", min_length=1)
    db_timezone: str = Field(default="UTC", alias="DB_TIMEZONE")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8080, alias="PORT", ge=1, le=65535)
    base_url: str | None = Field(default=None, alias="BASE_URL")
    health_ping_interval_s: float = Field(default=600.0, alias="HEALTH_PING_INTERVAL_S", gt=0)

    team_index_base: int = Field(default=0, alias="TEAM_INDEX_BASE", ge=0, le=1)
    submit_time_source: Literal["payload", "now"] = Field(
        default="payload", alias="SUBMIT_TIME_SOURCE"
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("db_timezone")
    @classmethod
    def validate_db_timezone_is_utc(cls, value: str) -> str:
        """Validate that the DB timezone is locked to UTC.

        Submission timestamps are stored as UTC instants; any other session timezone is rejected
        at startup.
        """

        if value.upper() != "UTC":
            raise ValueError("DB_TIMEZONE must be UTC")
        return "UTC"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalize `LOG_LEVEL` to an upper-case stdlib level name."""

        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {value!r}")
        return level

    @field_validator("base_url")
    @classmethod
    def strip_base_url(cls, value: str | None) -> str | None:
        """Normalize an empty `BASE_URL` to `None` and drop a trailing slash."""

        if value is None or not value.strip():
            return None
        return value.strip().rstrip("/")

    @property
    def payload_layout(self) -> PayloadLayout:
        """The form payload layout selected by `TEAM_INDEX_BASE` and `SUBMIT_TIME_SOURCE`."""

        return PayloadLayout(
            team_index_base=self.team_index_base,
            submit_time=self.submit_time_source,
        )


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is missing or invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
