"""Webhook service entrypoint."""

from __future__ import annotations

import logging

from aiohttp import web

from src.app import create_app
from src.config.logging import configure_logging
from src.config.settings import Settings, load_settings
from src.web.keepalive import keep_alive_ctx
from src.web.routes import APP_KEY, create_web_app

logger = logging.getLogger(__name__)


async def _close_pool(web_app: web.Application) -> None:
    logger.info("shutting down")
    await web_app[APP_KEY].pool.close()


async def init_web_app(settings: Settings) -> web.Application:
    """Open the DB pool, load issued subscription numbers and build the aiohttp application.

    The pool is closed from `on_cleanup`, which `web.run_app` also runs on SIGINT/SIGTERM.
    """

    app = await create_app(settings)

    web_app = create_web_app(app)
    if settings.base_url:
        web_app.cleanup_ctx.append(
            keep_alive_ctx(settings.base_url, settings.health_ping_interval_s)
        )
    web_app.on_cleanup.append(_close_pool)

    logger.info("serving host=%s port=%d", settings.host, settings.port)
    return web_app


def main() -> None:
    """Serve the webhook until the process is stopped."""

    settings = load_settings()
    configure_logging(settings.log_level)

    web.run_app(
        init_web_app(settings),
        host=settings.host,
        port=settings.port,
        handle_signals=True,
        print=None,
    )


if __name__ == "__main__":
    main()
