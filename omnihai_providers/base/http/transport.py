"""``httpx``-backed :class:`~.types.Transport` implementation.

Retries connection-level failures only (connect errors, timeouts and resets)
using the shared :func:`~omnihai_providers.base.resilience.retry.retry`
policy: at most three attempts with a one second backoff doubling on each
retry. Status errors are never retried; a response with status >= 400 raises
the matching :func:`~omnihai_providers.base.errors.error_for_status` subclass.
"""
from __future__ import annotations

import itertools
import logging
import time
from typing import Callable, Iterator, Optional, TypeVar

import httpx

from ..errors import ErrorCode, ProviderError, TransportFailureError, error_for_status
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import Attachment
from ..resilience.retry import RetryConfig, retry
from .client import get_httpx_client
from .types import APPLICATION_JSON, TEXT_EVENT_STREAM, HttpRequest, HttpResult

T = TypeVar("T")

UPLOADED_FILE_NAME_PREFIX = "omnihai."
USER_AGENT = "omnihai-providers"

_RETRYABLE_MESSAGE_HINTS = ("timed", "terminated", "reset", "refused", "goaway")
_BAD_REQUEST_STATUS = 400

_logger = get_logger("providers.http")


def is_retryable(exc: BaseException) -> bool:
    """True for transient connection failures worth another attempt."""
    if isinstance(exc, (httpx.ConnectError, httpx.TimeoutException)):
        return True
    if not isinstance(exc, httpx.TransportError):
        return False
    current: Optional[BaseException] = exc
    while current is not None:
        if any(hint in str(current).lower() for hint in _RETRYABLE_MESSAGE_HINTS):
            return True
        current = current.__cause__ or current.__context__
    return False


class HttpxTransport:
    """Synchronous transport over pooled ``httpx`` clients.

    Parameters:
        base_url: Used only as pool key so every service shares connections
            with services of the same endpoint.
        retry_config: Override the retry policy (tests pass a no-op ``sleep``).
        ctx: Logging context bound to every event of this transport.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        retry_config: Optional[RetryConfig] = None,
        ctx: Optional[LogContext] = None,
    ) -> None:
        self._base_url = base_url
        self._ctx = ctx
        self._retry_config = retry_config or RetryConfig(
            max_attempts=3,
            initial_delay=1.0,
            delay_base=2.0,
            retryable_codes=(ErrorCode.TRANSIENT,),
            attempt_logger=self._log_attempt,
        )

    def send(self, request: HttpRequest) -> HttpResult:
        self._log_request(request)

        def _send(client: httpx.Client) -> HttpResult:
            response = client.request(
                request.method,
                request.url,
                headers=self._headers(request, APPLICATION_JSON),
                json=request.json,
            )
            return self._check(request, response)

        return self._with_retry("request", _send)

    def open_stream(self, request: HttpRequest) -> Iterator[str]:
        self._log_request(request)

        def _open(client: httpx.Client) -> httpx.Response:
            built = client.build_request(
                request.method,
                request.url,
                headers=self._headers(request, TEXT_EVENT_STREAM),
                json=request.json,
            )
            response = client.send(built, stream=True)
            if response.status_code >= _BAD_REQUEST_STATUS:
                try:
                    body = response.read().decode("utf-8", errors="replace")
                finally:
                    response.close()
                raise error_for_status(request.url, response.status_code, body)
            return response

        response = self._with_retry("stream", _open)
        self._log_response(request, response.status_code, streaming=True)
        return self._iter_lines(response)

    def upload(self, request: HttpRequest, attachment: Attachment) -> HttpResult:
        self._log_request(request, file_name=attachment.file_name)

        def _upload(client: httpx.Client) -> HttpResult:
            files = {
                "file": (
                    UPLOADED_FILE_NAME_PREFIX + attachment.file_name,
                    attachment.read_bytes(),
                    attachment.mime_type,
                )
            }
            response = client.request(
                request.method,
                request.url,
                headers=self._headers(request, APPLICATION_JSON),
                data=dict(attachment.metadata),
                files=files,
            )
            return self._check(request, response)

        return self._with_retry("upload", _upload)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _with_retry(self, purpose: str, action: Callable[[httpx.Client], T]) -> T:
        client = get_httpx_client(self._base_url, purpose)
        attempts = itertools.count()

        @retry(self._retry_config)
        def _attempt() -> T:
            attempt = next(attempts)
            try:
                return action(client)
            except httpx.TransportError as exc:
                raise TransportFailureError(attempt, raw=exc, retryable=is_retryable(exc)) from exc

        return _attempt()

    def _check(self, request: HttpRequest, response: httpx.Response) -> HttpResult:
        self._log_response(request, response.status_code)
        if response.status_code >= _BAD_REQUEST_STATUS:
            raise error_for_status(request.url, response.status_code, response.text)
        return HttpResult(response.status_code, response.text)

    @staticmethod
    def _headers(request: HttpRequest, accept: str) -> dict:
        headers = {"User-Agent": USER_AGENT, "Accept": accept}
        headers.update(request.headers)
        return headers

    def _iter_lines(self, response: httpx.Response) -> Iterator[str]:
        try:
            yield from response.iter_lines()
        finally:
            response.close()

    def _log_request(self, request: HttpRequest, **extra) -> None:
        normalized_log_event(
            _logger,
            "http.request",
            self._ctx,
            phase="start",
            level=logging.DEBUG,
            method=request.method,
            url=request.safe_url,
            **extra,
        )

    def _log_response(self, request: HttpRequest, status_code: int, streaming: bool = False) -> None:
        normalized_log_event(
            _logger,
            "http.response",
            self._ctx,
            phase="finalize",
            level=logging.DEBUG,
            url=request.safe_url,
            status=status_code,
            streaming=streaming,
        )

    def _log_attempt(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: Optional[float],
        error: Optional[ProviderError],
    ) -> None:
        if error is None or not error.retryable:
            return
        normalized_log_event(
            _logger,
            "http.retry",
            self._ctx,
            phase="retry",
            attempt=attempt,
            error_code=error.code.value if error else None,
            level=logging.WARNING if delay is not None else logging.ERROR,
            max_attempts=max_attempts,
            delay=delay,
            ts=time.time(),
        )


__all__ = ["HttpxTransport", "UPLOADED_FILE_NAME_PREFIX", "is_retryable"]
