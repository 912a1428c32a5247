"""Tests for the service entrypoint wiring and shutdown."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest
from aiohttp import test_utils

from src.web import main as main_module


class _FakePool:
    def __init__(self) -> None:
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def _settings(**overrides: Any) -> Any:
    values: dict[str, Any] = {
        "host": "127.0.0.1",
        "port": 8081,
        "base_url": None,
        "health_ping_interval_s": 600.0,
        "log_level": "DEBUG",
        "webhook_secret": "s3cret",
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def test_main_configures_logging_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = _settings()
    levels: list[str | None] = []
    run_calls: list[dict[str, Any]] = []

    def _fake_run_app(app: Any, **kwargs: Any) -> None:
        app.close()
        run_calls.append(kwargs)

    monkeypatch.setattr(main_module, "load_settings", lambda: settings)
    monkeypatch.setattr(main_module, "configure_logging", lambda level=None: levels.append(level))
    monkeypatch.setattr(main_module.web, "run_app", _fake_run_app)

    main_module.main()

    assert levels == ["DEBUG"]
    assert run_calls == [
        {"host": "127.0.0.1", "port": 8081, "handle_signals": True, "print": None}
    ]


@pytest.mark.asyncio
async def test_cleanup_closes_pool(monkeypatch: pytest.MonkeyPatch) -> None:
    pool = _FakePool()
    settings = _settings()

    async def _fake_create_app(_settings: Any) -> Any:
        return SimpleNamespace(settings=settings, pool=pool, handler=None)

    monkeypatch.setattr(main_module, "create_app", _fake_create_app)

    web_app = await main_module.init_web_app(settings)
    async with test_utils.TestServer(web_app):
        assert pool.closed is False

    assert pool.closed is True


@pytest.mark.asyncio
async def test_keep_alive_is_registered_only_with_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    async def _fake_create_app(settings: Any) -> Any:
        return SimpleNamespace(settings=settings, pool=_FakePool(), handler=None)

    monkeypatch.setattr(main_module, "create_app", _fake_create_app)

    without = await main_module.init_web_app(_settings())
    with_url = await main_module.init_web_app(_settings(base_url="https://example.org"))

    assert len(with_url.cleanup_ctx) == len(without.cleanup_ctx) + 1
