"""Transactional persistence of form submissions.

Each submission is stored as one `inschrijving` row plus one `team` row per team, inside a single
transaction. Every submission gets a random 6-digit subscription number that has never been issued
before.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import UTC, datetime

import psycopg
from psycopg_pool import AsyncConnectionPool

from src.db.pool import get_conn
from src.db.query import fetch_column_values
from src.db.rows import iter_team_rows, submission_row
from src.form.schema import Language, Submission

logger = logging.getLogger(__name__)

SUBSCRIPTION_ID_SPACE = 1_000_000

LOAD_SUBSCRIPTION_IDS_SQL = "SELECT inschrijfnummer FROM inschrijving"

INSERT_SUBMISSION_SQL = """
    INSERT INTO inschrijving (inschrijfnummer, jaar, voornaam, achternaam, email, telefoon,
                              vereniging, taal, inschrijfdatum)
    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
    RETURNING id
"""

INSERT_TEAM_SQL = """
    INSERT INTO team (inschrijvingsid, teamnaam, type, niveau)
    VALUES (%s, %s, %s, %s)
"""


class StorageError(RuntimeError):
    """Raised when submissions cannot be read from or written to the database."""


@dataclass(frozen=True)
class StoredSubmission:
    """Outcome of a committed submission write."""

    subscription_id: str
    submission_key: int
    year: int
    team_count: int


def _utc_now() -> datetime:
    return datetime.now(UTC)


class SubscriptionWriter:
    """Writes submissions and issues their subscription numbers.

    The writer owns the set of issued subscription numbers. It must be the only writer to the
    `inschrijving` table: numbers issued by another process are not seen until restart.
    """

    def __init__(
            self,
            pool: AsyncConnectionPool,
            subscription_ids: set[str],
            *,
            rng: random.Random | None = None,
    ) -> None:
        self._pool = pool
        self._subscription_ids = subscription_ids
        self._rng = rng or random.Random()

    @classmethod
    async def create(
            cls,
            pool: AsyncConnectionPool,
            *,
            rng: random.Random | None = None,
    ) -> SubscriptionWriter:
        """Create a writer, loading every subscription number issued so far.

        Raises:
            StorageError: If the existing numbers cannot be loaded.
        """

        try:
            async with get_conn(pool) as conn:
                values = await fetch_column_values(conn, LOAD_SUBSCRIPTION_IDS_SQL)
        except psycopg.Error as exc:
            raise StorageError("Could not load existing subscription numbers") from exc

        subscription_ids = {str(value).strip() for value in values}
        logger.info("loaded subscription_ids=%d", len(subscription_ids))
        return cls(pool, subscription_ids, rng=rng)

    @property
    def issued_count(self) -> int:
        return len(self._subscription_ids)

    def is_issued(self, subscription_id: str) -> bool:
        return subscription_id in self._subscription_ids

    def next_subscription_id(self) -> str:
        """Draw a random 6-digit number that has not been issued yet and reserve it.

        There is no await between the membership check and the add, so tasks sharing this writer
        cannot draw the same number.
        """

        if len(self._subscription_ids) >= SUBSCRIPTION_ID_SPACE:
            raise StorageError("All subscription numbers have been issued")

        while True:
            candidate = f"{self._rng.randrange(SUBSCRIPTION_ID_SPACE):06d}"
            if candidate not in self._subscription_ids:
                self._subscription_ids.add(candidate)
                return candidate

    async def store(self, submission: Submission, language: Language) -> StoredSubmission:
        """Persist a submission and its teams in one transaction.

        The subscription number stays reserved even when the write fails.

        Raises:
            StorageError: On any database failure; nothing of the submission is committed.
        """

        subscription_id = self.next_subscription_id()
        # The sign-up season runs from April to August, so the current year is the season year.
        year = _utc_now().year

        try:
            async with get_conn(self._pool) as conn:
                async with conn.transaction():
                    async with conn.cursor() as cur:
                        await cur.execute(
                            INSERT_SUBMISSION_SQL,
                            submission_row(
                                submission,
                                subscription_id=subscription_id,
                                year=year,
                                language=language,
                            ),
                        )
                        row = await cur.fetchone()
                        if row is None:
                            raise StorageError("Submission insert returned no id")
                        submission_key = int(row[0])

                        await cur.executemany(
                            INSERT_TEAM_SQL,
                            list(iter_team_rows(submission_key, submission.teams)),
                        )
        except psycopg.Error as exc:
            raise StorageError(f"Could not store submission {subscription_id}") from exc

        return StoredSubmission(
            subscription_id=subscription_id,
            submission_key=submission_key,
            year=year,
            team_count=len(submission.teams),
        )
