"""Pooled ``httpx.Client`` instances shared by every transport.

Clients are keyed by ``(base_url, purpose)`` so the request, stream and upload
paths of one endpoint each keep their own connection pool. A client is
rebuilt when the timeout configuration it was created with changes, and all
clients are closed at interpreter exit.
"""

from __future__ import annotations

import atexit
import threading
from typing import Dict, Optional, Tuple

import httpx

from ..logging import get_logger
from ..timeouts import TimeoutConfig, get_timeout_config

_PoolKey = Tuple[Optional[str], str]

_pool: Dict[_PoolKey, Tuple[TimeoutConfig, httpx.Client]] = {}
_pool_lock = threading.Lock()
_logger = get_logger("providers.http")


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.Client:
    """Return the pooled client for ``base_url`` and ``purpose``, creating it on first use.

    Absolute request URLs bypass ``base_url``; ``None`` shares one pool per
    purpose across endpoints.
    """
    timeouts = get_timeout_config()
    key = (base_url, purpose)
    with _pool_lock:
        entry = _pool.get(key)
        if entry is not None and entry[0] == timeouts:
            return entry[1]
        client = httpx.Client(base_url=base_url or "", timeout=timeouts.to_httpx())
        _pool[key] = (timeouts, client)
        stale = entry[1] if entry is not None else None
    if stale is not None:
        _close(stale)
    _logger.debug("Created %s client for %s", purpose, base_url or "<absolute urls>")
    return client


def _close(client: httpx.Client) -> None:
    try:
        client.close()
    except (httpx.HTTPError, RuntimeError) as exc:
        _logger.debug("Ignoring error while closing pooled client: %s", exc)


def close_all_clients() -> None:
    """Close and forget every pooled client."""
    with _pool_lock:
        clients = [client for _, client in _pool.values()]
        _pool.clear()
    for client in clients:
        _close(client)


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients"]
