"""Small DB query helpers shared by the writer and maintenance code."""

from __future__ import annotations

from typing import Any, LiteralString, cast

from psycopg import AsyncConnection


async def fetch_column_values(
        conn: AsyncConnection, sql: str, params: tuple[Any, ...] = ()
) -> list[Any]:
    """Execute a query and return the first column of every row.

    Contract:
        - The query must be parameterized; all values are passed via `params`.
        - DB errors are not swallowed (caller decides how to handle them).
    """

    async with conn.cursor() as cur:
        await cur.execute(cast(LiteralString, sql), params)
        rows = await cur.fetchall()

    return [row[0] for row in rows]
