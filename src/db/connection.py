"""Postgres connection helpers.

Submission timestamps are `TIMESTAMPTZ`; sessions are pinned to UTC so that maintenance scripts and
the webhook read the same wall-clock values back.
"""

from __future__ import annotations

import os

import psycopg
from psycopg import AsyncConnection

APPLICATION_NAME = "registration-handler"


def require_database_url() -> str:
    """Read `DATABASE_URL` from the environment or raise a clear error."""

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise RuntimeError("DATABASE_URL is required (set it in .env or environment)")
    return database_url


def connect_utc(database_url: str) -> psycopg.Connection:
    """Open a synchronous connection (migrations, scripts) with a UTC session."""

    conn = psycopg.connect(database_url, application_name=APPLICATION_NAME)
    conn.execute("SET TIME ZONE 'UTC'", prepare=False)
    return conn


async def ensure_utc(conn: AsyncConnection) -> None:
    """Pin an async session to UTC and leave it idle (not INTRANS) for the pool."""

    async with conn.cursor() as cur:
        await cur.execute("SET TIME ZONE 'UTC'", prepare=False)
    await conn.commit()
