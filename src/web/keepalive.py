"""Periodic self-ping of the `/health` endpoint.

Free-tier hosts put idle services to sleep; a sleeping service misses webhook deliveries. When
`BASE_URL` is configured the service requests its own public health URL at a fixed interval.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Callable

import aiohttp
from aiohttp import web

logger = logging.getLogger(__name__)

PING_TIMEOUT_S = 30.0


async def ping_once(session: aiohttp.ClientSession, url: str) -> bool:
    """Request `url` once; returns whether it answered `200`. Failures are only logged."""

    try:
        async with session.get(url) as resp:
            if resp.status != 200:
                logger.warning("health ping failed url=%s status=%d", url, resp.status)
                return False
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        logger.warning("health ping failed url=%s error=%r", url, exc)
        return False

    logger.debug("health ping ok url=%s", url)
    return True


async def keep_alive(base_url: str, interval_s: float) -> None:
    """Ping `<base_url>/health` every `interval_s` seconds until cancelled."""

    url = f"{base_url}/health"
    timeout = aiohttp.ClientTimeout(total=PING_TIMEOUT_S)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        while True:
            await asyncio.sleep(interval_s)
            await ping_once(session, url)


def keep_alive_ctx(
        base_url: str, interval_s: float
) -> Callable[[web.Application], AsyncIterator[None]]:
    """Return an aiohttp `cleanup_ctx` entry running `keep_alive` for the app's lifetime."""

    async def _ctx(_web_app: web.Application) -> AsyncIterator[None]:
        task = asyncio.create_task(keep_alive(base_url, interval_s))
        logger.info("keep-alive started url=%s/health interval_s=%s", base_url, interval_s)
        yield
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    return _ctx
