"""Form message handling: language detection -> parsing -> storage."""

from __future__ import annotations

import logging
from enum import StrEnum
from time import monotonic

from src.form.parser import detect_language, parse_submission
from src.form.schema import Message, PayloadLayout
from src.form.writer import SubscriptionWriter

logger = logging.getLogger(__name__)


class HandleOutcome(StrEnum):
    """What happened to a message that was handled without error."""

    stored = "stored"
    ignored = "ignored"


class FormHandler:
    """Handles form submissions delivered by the webhook.

    Messages for forms other than the team registration are ignored. Parse and storage failures
    (`SubmissionParseError`, `StorageError`) are raised to the caller; the submission is then not
    stored at all.
    """

    def __init__(self, writer: SubscriptionWriter, *, layout: PayloadLayout | None = None) -> None:
        self._writer = writer
        self._layout = layout or PayloadLayout()

    async def handle(self, message: Message) -> HandleOutcome:
        started = monotonic()

        language = detect_language(message.title)
        if language is None:
            logger.info("ignoring message title=%r", message.title)
            return HandleOutcome.ignored

        submission = parse_submission(message.data, language, layout=self._layout)
        stored = await self._writer.store(submission, language)

        latency_ms = int((monotonic() - started) * 1000)
        logger.info(
            "stored title=%r language=%s subscription_id=%s teams=%d latency_ms=%d",
            message.title,
            language.value,
            stored.subscription_id,
            stored.team_count,
            latency_ms,
        )
        return HandleOutcome.stored
