"""
Map arbitrary exceptions to :class:`ErrorCode` and recover typed errors from
executor failures.
"""
from __future__ import annotations

import asyncio
from concurrent.futures import CancelledError as FutureCancelledError
from typing import Optional

from .error_code import ErrorCode
from .http_errors import _HTTP_STATUS_MAP
from .provider_error import ProviderError


def _status_of(exc: BaseException) -> Optional[int]:
    """HTTP status carried by ``exc`` (``status_code``, ``status`` or ``response.status_code``)."""
    candidates = (
        getattr(exc, "status_code", None),
        getattr(exc, "status", None),
        getattr(getattr(exc, "response", None), "status_code", None),
    )
    for value in candidates:
        if isinstance(value, int) and 100 <= value < 600:
            return value
    return None


# Checked in order; the first code with a matching needle wins.
_MESSAGE_NEEDLES = (
    (ErrorCode.TIMEOUT, ("timeout", "timed out")),
    (ErrorCode.AUTHENTICATION, ("api key", "unauthorized", "unauthenticated", "authentication")),
    (ErrorCode.AUTHORIZATION, ("forbidden", "permission", "access denied")),
    (ErrorCode.UNSUPPORTED, ("unsupported", "not supported")),
    (ErrorCode.ENDPOINT_NOT_FOUND, ("not found", "does not exist")),
    (ErrorCode.UNAVAILABLE, ("unavailable",)),
    (ErrorCode.BAD_REQUEST, ("bad request", "validation", "invalid", "malformed")),
    (ErrorCode.SERVER_ERROR, ("server error", "internal error")),
)


def _code_from_message(text: str) -> ErrorCode:
    msg = text.lower()
    if "rate" in msg and "limit" in msg:
        return ErrorCode.RATE_LIMIT
    return next(
        (code for code, needles in _MESSAGE_NEEDLES if any(n in msg for n in needles)),
        ErrorCode.UNKNOWN,
    )


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. Cancellation of a future or task.
        3. Timeout exceptions (sync/async).
        4. HTTP status mapping.
        5. Substring heuristics.
        6. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (FutureCancelledError, asyncio.CancelledError)):
        return ErrorCode.CANCELLED
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    status = _status_of(exc)
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    return _code_from_message(str(exc))


def unwrap_async_error(exc: BaseException, *, provider: str = "", model: Optional[str] = None) -> ProviderError:
    """Reduce an error raised through an executor back to a typed provider error.

    ``concurrent.futures`` already re-raises the worker's exception, but it may
    arrive wrapped (e.g. by a callback chain) in an exception whose
    ``__cause__`` holds the real failure. The cause chain is walked until a
    :class:`ProviderError` is found; otherwise the outermost exception is
    wrapped in a classified ``ProviderError`` with ``raw`` pointing at it.
    """
    current: Optional[BaseException] = exc
    seen = set()
    while current is not None and id(current) not in seen:
        if isinstance(current, ProviderError):
            return current
        seen.add(id(current))
        current = current.__cause__
    return ProviderError(
        code=classify_exception(exc),
        message=f"Async request failed: {exc}",
        provider=provider,
        model=model,
        raw=exc if isinstance(exc, Exception) else None,
    )


__all__ = [
    "classify_exception",
    "unwrap_async_error",
]
