"""
Normalized failure codes for AI vendor calls.

Every :class:`ProviderError` carries one :class:`ErrorCode`; it is what
``chat.error``, ``http.retry`` and ``stream.decode_error`` events report as
``error_code``. Values are lowercase snake_case and stable across releases, so
dashboards can group failures without knowing which vendor produced them.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Why an AI call failed, independent of the vendor."""

    # The vendor refused the request as sent.
    BAD_REQUEST = "bad_request"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    ENDPOINT_NOT_FOUND = "endpoint_not_found"
    RATE_LIMIT = "rate_limit"

    # The call did not complete.
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    TRANSIENT = "transient"
    UNAVAILABLE = "unavailable"
    SERVER_ERROR = "server_error"

    # The call completed but its content is unusable.
    MALFORMED_RESPONSE = "malformed_response"
    VENDOR_ERROR = "vendor_error"
    TOKEN_LIMIT = "token_limit"

    # Rejected locally before any network traffic.
    UNSUPPORTED = "unsupported"

    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
