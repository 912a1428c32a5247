"""Logging configuration for the webhook service."""

from __future__ import annotations

import logging
import os


def configure_logging(level: str | None = None) -> None:
    """Configure Python logging for the process.

    Logs are intended for internal diagnostics only; error details are never echoed back to the
    form plugin.
    """

    log_level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # One access line per request duplicates the handler logs.
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
