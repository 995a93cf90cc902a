from __future__ import annotations

from omnihai_providers.base.timeouts import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    get_timeout_config,
)


def test_defaults(monkeypatch):
    monkeypatch.delenv("OMNIHAI_CONNECT_TIMEOUT_SECONDS", raising=False)
    monkeypatch.delenv("OMNIHAI_REQUEST_TIMEOUT_SECONDS", raising=False)
    cfg = get_timeout_config()
    assert cfg.connect_timeout_seconds == DEFAULT_CONNECT_TIMEOUT_SECONDS  # nosec B101
    assert cfg.request_timeout_seconds == DEFAULT_REQUEST_TIMEOUT_SECONDS  # nosec B101
    assert get_timeout_config() is cfg  # nosec B101


def test_env_overrides_refresh_cache(monkeypatch):
    monkeypatch.setenv("OMNIHAI_CONNECT_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("OMNIHAI_REQUEST_TIMEOUT_SECONDS", "nope")
    cfg = get_timeout_config()
    assert cfg.connect_timeout_seconds == 2.5  # nosec B101
    assert cfg.request_timeout_seconds == DEFAULT_REQUEST_TIMEOUT_SECONDS  # nosec B101
    timeout = cfg.to_httpx()
    assert timeout.connect == 2.5 and timeout.read == DEFAULT_REQUEST_TIMEOUT_SECONDS  # nosec B101
