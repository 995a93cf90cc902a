"""
Transport-level error types.

`HttpStatusError` represents a non-2xx response. A small fixed set of status
codes gets a dedicated subclass so callers can ``except`` on the condition
they care about; anything else falls back to the generic class. The error
message never contains the request query string because some vendors pass
the API key there.
"""
from __future__ import annotations

from typing import Dict, Optional, Type

from .error_code import ErrorCode
from .provider_error import ProviderError

_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.BAD_REQUEST,
    401: ErrorCode.AUTHENTICATION,
    403: ErrorCode.AUTHORIZATION,
    404: ErrorCode.ENDPOINT_NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    422: ErrorCode.BAD_REQUEST,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}


def _strip_query(uri: str) -> str:
    return uri.split("?", 1)[0]


class HttpStatusError(ProviderError):
    """Raised for a response whose status code signals failure.

    Attributes:
        uri: Request URI (including the query string; not used in the message).
        status_code: HTTP status code returned by the vendor.
        response_body: Raw response body text.
    """

    def __init__(self, uri: str, status_code: int, response_body: str = "") -> None:
        super().__init__(
            code=_HTTP_STATUS_MAP.get(status_code, ErrorCode.UNKNOWN),
            message=f"HTTP {status_code} at {_strip_query(uri)}: {response_body}",
        )
        self.uri = uri
        self.status_code = status_code
        self.response_body = response_body


class BadRequestError(HttpStatusError):
    """HTTP 400."""


class AuthenticationError(HttpStatusError):
    """HTTP 401; the API key is missing or invalid."""


class AuthorizationError(HttpStatusError):
    """HTTP 403; the API key lacks access to the resource or model."""


class EndpointNotFoundError(HttpStatusError):
    """HTTP 404; usually a wrong endpoint or model name."""


class RateLimitExceededError(HttpStatusError):
    """HTTP 429."""


class ServiceUnavailableError(HttpStatusError):
    """HTTP 503."""


_STATUS_ERRORS: Dict[int, Type[HttpStatusError]] = {
    400: BadRequestError,
    401: AuthenticationError,
    403: AuthorizationError,
    404: EndpointNotFoundError,
    429: RateLimitExceededError,
    503: ServiceUnavailableError,
}


def error_for_status(uri: str, status_code: int, response_body: Optional[str] = None) -> HttpStatusError:
    """Return the most specific :class:`HttpStatusError` for ``status_code``."""
    klass = _STATUS_ERRORS.get(status_code, HttpStatusError)
    return klass(uri, status_code, response_body or "")


class TransportFailureError(ProviderError):
    """Raised when a request could not be completed at the connection level."""

    def __init__(self, attempts: int, raw: Optional[Exception] = None, *, retryable: bool = True) -> None:
        super().__init__(
            code=ErrorCode.TRANSIENT,
            message=f"Request failed ({attempts} retries)",
            retryable=retryable,
            raw=raw,
        )


__all__ = [
    "_HTTP_STATUS_MAP",
    "HttpStatusError",
    "BadRequestError",
    "AuthenticationError",
    "AuthorizationError",
    "EndpointNotFoundError",
    "RateLimitExceededError",
    "ServiceUnavailableError",
    "TransportFailureError",
    "error_for_status",
]
