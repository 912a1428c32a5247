"""Async Postgres connection pool used by the webhook."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from dotenv import load_dotenv
from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

from src.db.connection import APPLICATION_NAME, ensure_utc, require_database_url


def create_pool(
        database_url: str | None = None,
        *,
        min_size: int = 1,
        max_size: int | None = None,
        timeout: float = 30.0,
) -> AsyncConnectionPool:
    """Create an async DB pool; sessions are pinned to UTC when the pool hands them out.

    Notes:
        - The pool is created closed (`open=False`); `await pool.open()` at startup.
        - Without `database_url`, `.env` is loaded and `DATABASE_URL` is used.
    """

    if database_url is None:
        load_dotenv(".env")
        database_url = require_database_url()

    return AsyncConnectionPool(
        conninfo=database_url,
        kwargs={"application_name": APPLICATION_NAME},
        min_size=min_size,
        max_size=max_size,
        timeout=timeout,
        open=False,
        configure=ensure_utc,
    )


@asynccontextmanager
async def get_conn(pool: AsyncConnectionPool) -> AsyncIterator[AsyncConnection]:
    """Borrow a pooled connection.

    On clean exit the pool commits whatever the caller left open; on error it rolls back.
    """

    async with pool.connection() as conn:
        yield conn
