"""Pytest configuration for the providers test suite.

Provides:
- an autouse fixture isolating every test from the developer's environment
  (``.env`` file, ``PROVIDERS_CONFIG_FILE`` and ``<PROVIDER>_*`` variables);
- ``scripted_transport`` building a :class:`FakeTransport`, a scripted
  in-memory transport recording requests;
- ``make_service`` building an :class:`AIService` over a fake transport;
- ``provider_logs`` capturing structured events of the ``providers`` logger.
"""
from __future__ import annotations

import json
import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, Iterable, Iterator, List, Optional, Tuple, Union

import pytest

from omnihai_providers.base.http import HttpRequest, HttpResult
from omnihai_providers.base.logging import get_logger
from omnihai_providers.base.models import Attachment
from omnihai_providers.config import clear_config_cache
from omnihai_providers.config.defaults import PROVIDER_DEFAULTS
from omnihai_providers.config.env import env_key, reset_dotenv_state
from omnihai_providers.service import AIService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24
PDF_BYTES = b"%PDF-1.7\n" + b"\x00" * 24
TEST_API_KEY = "sk-unit-key"  # pragma: allowlist secret - fake credential
TEST_BASE_URL = "https://llm.invalid/v1"

Scripted = Union[str, Exception]


class FakeTransport:
    """In-memory transport replaying scripted bodies and recording every request.

    ``bodies`` feed :meth:`send` in order, ``stream_lines`` feed every
    :meth:`open_stream` call and ``upload_bodies`` feed :meth:`upload`. A
    scripted exception is raised instead of returned.
    """

    def __init__(
        self,
        bodies: Iterable[Scripted] = (),
        stream_lines: Iterable[str] = (),
        upload_bodies: Iterable[Scripted] = (),
    ) -> None:
        self.requests: List[HttpRequest] = []
        self.streams: List[HttpRequest] = []
        self.uploads: List[Tuple[HttpRequest, Attachment]] = []
        self.stream_closed = False
        self.lines_read = 0
        self._bodies: Deque[Scripted] = deque(bodies)
        self._stream_lines = list(stream_lines)
        self._upload_bodies: Deque[Scripted] = deque(upload_bodies)

    @staticmethod
    def _reply(queue: Deque[Scripted]) -> HttpResult:
        body = queue.popleft()
        if isinstance(body, Exception):
            raise body
        return HttpResult(200, body)

    def send(self, request: HttpRequest) -> HttpResult:
        self.requests.append(request)
        return self._reply(self._bodies)

    def open_stream(self, request: HttpRequest) -> Iterator[str]:
        self.streams.append(request)
        return self._lines()

    def _lines(self) -> Iterator[str]:
        try:
            for line in self._stream_lines:
                self.lines_read += 1
                yield line
        finally:
            self.stream_closed = True

    def upload(self, request: HttpRequest, attachment: Attachment) -> HttpResult:
        self.uploads.append((request, attachment))
        return self._reply(self._upload_bodies)

    @property
    def last_payload(self) -> Dict[str, Any]:
        return self.requests[-1].json or {}


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Hide real credentials, ``.env`` files and config files from every test."""
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.delenv("PROVIDERS_CONFIG_FILE", raising=False)
    for provider in PROVIDER_DEFAULTS:
        for suffix in ("MODEL", "API_KEY", "BASE_URL", "SYSTEM_MESSAGE"):
            monkeypatch.delenv(env_key(provider, suffix), raising=False)
    reset_dotenv_state()
    clear_config_cache()
    yield
    reset_dotenv_state()
    clear_config_cache()


@pytest.fixture()
def make_service() -> Callable[..., AIService]:
    """Factory for services talking to a :class:`FakeTransport`."""

    def _make(provider: str = "openai", transport: Optional[FakeTransport] = None, **kwargs: Any) -> AIService:
        kwargs.setdefault("api_key", TEST_API_KEY)
        kwargs.setdefault("base_url", TEST_BASE_URL)
        return AIService(provider, transport=transport or FakeTransport(), **kwargs)

    return _make


class _ListHandler(logging.Handler):
    """Capture log records into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def events(self, name: Optional[str] = None) -> List[Dict[str, Any]]:
        """Decoded JSON payloads, optionally filtered by ``event`` name."""
        out = []
        for record in self.records:
            message = record.getMessage()
            if not message.startswith("{"):
                continue
            payload = json.loads(message)
            if name is None or payload.get("event") == name:
                out.append(payload)
        return out


@pytest.fixture()
def provider_logs() -> Iterator[_ListHandler]:
    """Attach a collector to the shared ``providers`` logger (it does not propagate to root)."""
    logger = get_logger("providers")
    handler = _ListHandler()
    logger.addHandler(handler)
    try:
        yield handler
    finally:
        logger.removeHandler(handler)


@pytest.fixture()
def scripted_transport() -> Callable[..., FakeTransport]:
    """Factory for :class:`FakeTransport` instances (see its docstring)."""
    return FakeTransport


@pytest.fixture()
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture()
def pdf_bytes() -> bytes:
    return PDF_BYTES
