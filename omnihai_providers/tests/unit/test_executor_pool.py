from __future__ import annotations

import threading

from omnihai_providers.service import executor


def test_submit_runs_on_named_worker_thread():
    name = executor.submit(lambda: threading.current_thread().name).result(timeout=5)
    assert name.startswith("omnihai")  # nosec B101


def test_pool_is_shared_until_shutdown(monkeypatch):
    first = executor.get_executor()
    assert executor.get_executor() is first  # nosec B101
    executor.shutdown_executor()
    monkeypatch.setenv("OMNIHAI_MAX_WORKERS", "2")
    second = executor.get_executor()
    try:
        assert second is not first  # nosec B101
        assert second._max_workers == 2  # nosec B101
    finally:
        executor.shutdown_executor()


def test_invalid_worker_count_falls_back(monkeypatch):
    monkeypatch.setenv("OMNIHAI_MAX_WORKERS", "lots")
    assert executor._max_workers() is None  # nosec B101
    monkeypatch.setenv("OMNIHAI_MAX_WORKERS", "-3")
    assert executor._max_workers() is None  # nosec B101
