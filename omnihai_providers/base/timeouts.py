"""Unified timeout configuration for the HTTP transport.

Key Components
--------------
TimeoutConfig
    Dataclass capturing normalized timeout values in seconds.

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use only. Supported environment variables (all optional):
        OMNIHAI_CONNECT_TIMEOUT_SECONDS
        OMNIHAI_REQUEST_TIMEOUT_SECONDS

Design Constraints
------------------
1. No hard-coded ad-hoc timeouts outside this module.
2. Avoid per-call env parsing (cache after first read; a changed override
   refreshes the cache so tests can adjust values at runtime).
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx

DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0
DEFAULT_REQUEST_TIMEOUT_SECONDS = 60.0

_ENV_CONNECT = "OMNIHAI_CONNECT_TIMEOUT_SECONDS"
_ENV_REQUEST = "OMNIHAI_REQUEST_TIMEOUT_SECONDS"


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Time allowed to establish the connection.
        request_timeout_seconds: Time allowed for reading, writing and pool
            acquisition of one request. For streams this bounds the wait for
            the next line, not the whole stream.
    """

    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(self.request_timeout_seconds, connect=self.connect_timeout_seconds)


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read ``name`` as a positive float, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
        return val if val > 0 else default
    except ValueError:
        return default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - intentional, documented module cache
    cur_guard = "/".join([os.getenv(_ENV_CONNECT, ""), os.getenv(_ENV_REQUEST, "")])
    if _CACHED is not None and _ENV_GUARD == cur_guard:
        return _CACHED
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(_ENV_CONNECT, DEFAULT_CONNECT_TIMEOUT_SECONDS),
        request_timeout_seconds=_parse_env_float(_ENV_REQUEST, DEFAULT_REQUEST_TIMEOUT_SECONDS),
    )
    _ENV_GUARD = cur_guard
    return _CACHED


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "DEFAULT_CONNECT_TIMEOUT_SECONDS",
    "DEFAULT_REQUEST_TIMEOUT_SECONDS",
]
