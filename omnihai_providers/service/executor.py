"""Shared worker pool behind every ``*_async`` service call.

Lazily creates one process-wide :class:`~concurrent.futures.ThreadPoolExecutor`
(size from ``OMNIHAI_MAX_WORKERS``, default ``ThreadPoolExecutor``'s own
choice) guarded by a lock, and shuts it down at interpreter exit.

Work submitted here must not block on other work submitted here: a task
waiting for a sibling task can starve a saturated pool. Adapter callbacks such
as file uploads therefore run inline on the calling worker.
"""
from __future__ import annotations

import atexit
import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional, TypeVar

from ..base.logging import get_logger, log_event

T = TypeVar("T")

_ENV_MAX_WORKERS = "OMNIHAI_MAX_WORKERS"
_THREAD_NAME_PREFIX = "omnihai"

_executor: Optional[ThreadPoolExecutor] = None
_lock = threading.RLock()
_logger = get_logger("providers.service")


def _max_workers() -> Optional[int]:
    raw = os.getenv(_ENV_MAX_WORKERS)
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def get_executor() -> ThreadPoolExecutor:
    global _executor
    with _lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=_max_workers(), thread_name_prefix=_THREAD_NAME_PREFIX)
        return _executor


def submit(fn: Callable[..., T], *args: Any, **kwargs: Any) -> "Future[T]":
    return get_executor().submit(fn, *args, **kwargs)


def shutdown_executor(wait: bool = True) -> None:
    """Shut the shared pool down; the next :func:`submit` creates a fresh one."""
    global _executor
    with _lock:
        executor, _executor = _executor, None
    if executor is not None:
        executor.shutdown(wait=wait)
        log_event(_logger, "executor.shutdown", level=logging.DEBUG, wait=wait)


def _cleanup_at_exit() -> None:
    shutdown_executor(wait=False)


atexit.register(_cleanup_at_exit)


__all__ = ["get_executor", "submit", "shutdown_executor"]
