"""aiohttp request handlers for the form-plugin webhook.

Contract with the form plugin: `200 OK` means the submission was stored (or deliberately ignored);
any other status means it was not stored. Error details are logged, never returned on `500`.
"""

from __future__ import annotations

import hmac
import logging

from aiohttp import web
from pydantic import ValidationError

from src.app import App
from src.form.parser import SubmissionParseError
from src.form.schema import Message

logger = logging.getLogger(__name__)

APP_KEY = web.AppKey("app", App)

SECRET_HEADER = "X-hook-secret"
TEST_HEADER = "X-test"


def _secret_matches(supplied: str, expected: str) -> bool:
    return hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


async def handle_hook(request: web.Request) -> web.Response:
    """Receive one form submission from the WordPress form plugin."""

    app = request.app[APP_KEY]

    if not _secret_matches(request.headers.get(SECRET_HEADER, ""), app.settings.webhook_secret):
        logger.warning("rejected webhook: secret mismatch remote=%s", request.remote)
        return web.Response(status=403, text="Invalid Secret")

    body = await request.read()
    logger.debug("request body read bytes=%d", len(body))

    try:
        message = Message.model_validate_json(body)
    except ValidationError as exc:
        logger.warning("rejected webhook: invalid message errors=%d", exc.error_count())
        return web.json_response(
            {
                "error": "Invalid message",
                "details": exc.errors(include_url=False, include_input=False, include_context=False),
            },
            status=400,
        )

    if request.headers.get(TEST_HEADER):
        logger.info("received test message title=%r", message.title)
        return web.json_response(
            {"message": f"Received submission for form {message.title}", "data": message.data}
        )

    # noinspection PyBroadException
    try:
        outcome = await app.handler.handle(message)
    except SubmissionParseError as exc:
        logger.info("rejected submission title=%r reason=%s", message.title, exc)
        return web.Response(status=422, text=str(exc))
    except Exception:
        logger.exception("failed to handle message title=%r", message.title)
        return web.Response(status=500, text="Internal Server Error")

    logger.debug("handled message title=%r outcome=%s", message.title, outcome)
    return web.Response(text="OK")


async def handle_health(request: web.Request) -> web.Response:
    logger.debug("health check method=%s", request.method)
    return web.Response(text="OK")


def create_web_app(app: App) -> web.Application:
    """Build the aiohttp application serving `/hook` and `/health`."""

    web_app = web.Application()
    web_app[APP_KEY] = app
    web_app.router.add_post("/hook", handle_hook)
    web_app.router.add_get("/health", handle_health)
    return web_app
