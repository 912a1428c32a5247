"""Application composition root.

This module wires together configuration, the DB pool, and the form handler for the webhook
runtime.
"""

from __future__ import annotations

from dataclasses import dataclass

from psycopg_pool import AsyncConnectionPool

from src.config.settings import Settings
from src.db.pool import create_pool
from src.form.handler import FormHandler
from src.form.writer import SubscriptionWriter


@dataclass(frozen=True)
class App:
    """Shared application dependencies for request handlers."""

    settings: Settings
    pool: AsyncConnectionPool
    handler: FormHandler


async def create_app(settings: Settings) -> App:
    """Create the application container.

    Opens the DB pool and loads the issued subscription numbers before returning, so the webhook
    can accept submissions right away. Close `app.pool` at shutdown.
    """

    pool = create_pool(settings.database_url, max_size=10)
    await pool.open(wait=True)
    try:
        writer = await SubscriptionWriter.create(pool)
    except BaseException:
        await pool.close()
        raise

    handler = FormHandler(writer, layout=settings.payload_layout)
    return App(settings=settings, pool=pool, handler=handler)
