"""Pytest configuration.

The repository uses a flat `src/` layout. This conftest ensures tests can import from the `src.*`
namespace when running `pytest` without installing the package, and provides an in-memory stand-in
for the Postgres pool used by the submission writer.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import psycopg
import pytest

# Ensure `import src...` works when running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))


class FakeDatabase:
    """Records the rows written through `FakeConnection`, separating staged from committed.

    Rows inserted inside a transaction stay staged on that connection until the transaction block
    exits cleanly. Setting `fail_on` to `"load"`, `"submission"` or `"team"` raises a psycopg error
    at that step. Cursor calls yield to the event loop, like real network round trips.
    """

    def __init__(self, subscription_ids: Iterable[str] = ()) -> None:
        self.existing_ids = list(subscription_ids)
        self.submissions: list[tuple[Any, ...]] = []
        self.teams: list[tuple[Any, ...]] = []
        self.staged_at_failure: list[tuple[Any, ...]] | None = None
        self.fail_on: str | None = None
        self.connections = 0
        self.commits = 0
        self.rollbacks = 0
        self._next_key = 100

    def allocate_key(self) -> int:
        self._next_key += 1
        return self._next_key


class FakeCursor:
    def __init__(self, conn: FakeConnection) -> None:
        self._conn = conn
        self._db = conn.db
        self._result: list[tuple[Any, ...]] = []

    async def __aenter__(self) -> FakeCursor:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    async def execute(self, sql: str, params: tuple[Any, ...] = ()) -> None:
        await asyncio.sleep(0)
        if sql.lstrip().startswith("SELECT inschrijfnummer"):
            if self._db.fail_on == "load":
                self._conn.fail("load")
            self._result = [(value,) for value in self._db.existing_ids]
        elif "INSERT INTO inschrijving" in sql:
            if self._db.fail_on == "submission":
                self._conn.fail("submission")
            key = self._db.allocate_key()
            self._conn.staged_submissions.append((key, *params))
            self._result = [(key,)]
        else:
            raise AssertionError(f"unexpected SQL: {sql}")

    async def executemany(self, sql: str, params_seq: list[tuple[Any, ...]]) -> None:
        await asyncio.sleep(0)
        assert "INSERT INTO team" in sql
        if self._db.fail_on == "team":
            self._conn.fail("team")
        self._conn.staged_teams.extend(params_seq)

    async def fetchone(self) -> tuple[Any, ...] | None:
        return self._result[0] if self._result else None

    async def fetchall(self) -> list[tuple[Any, ...]]:
        return list(self._result)


class FakeConnection:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db
        self.staged_submissions: list[tuple[Any, ...]] = []
        self.staged_teams: list[tuple[Any, ...]] = []

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def fail(self, step: str) -> None:
        self.db.staged_at_failure = list(self.staged_submissions)
        raise psycopg.OperationalError(f"simulated failure during {step}")

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        db = self.db
        self.staged_submissions = []
        self.staged_teams = []
        try:
            yield
        except BaseException:
            db.rollbacks += 1
            self.staged_submissions = []
            self.staged_teams = []
            raise
        db.submissions.extend(self.staged_submissions)
        db.teams.extend(self.staged_teams)
        self.staged_submissions = []
        self.staged_teams = []
        db.commits += 1


@pytest.fixture
def fake_db(monkeypatch: pytest.MonkeyPatch) -> FakeDatabase:
    """A `FakeDatabase` wired in place of the pool connections used by the writer."""

    db = FakeDatabase()

    @asynccontextmanager
    async def _fake_get_conn(_pool: Any) -> AsyncIterator[FakeConnection]:
        db.connections += 1
        yield FakeConnection(db)

    monkeypatch.setattr("src.form.writer.get_conn", _fake_get_conn)
    return db
