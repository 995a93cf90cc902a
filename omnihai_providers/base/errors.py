"""Unified provider error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``omnihai_providers.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.adapter_errors import (
    CapabilityUnsupportedError,
    MalformedResponseError,
    TokenLimitExceededError,
    VendorReportedError,
)
from .errors_parts.http_errors import (
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    EndpointNotFoundError,
    HttpStatusError,
    RateLimitExceededError,
    ServiceUnavailableError,
    TransportFailureError,
    error_for_status,
)
from .errors_parts.classification import classify_exception, unwrap_async_error

__all__ = [
    "ErrorCode",
    "ProviderError",
    "CapabilityUnsupportedError",
    "MalformedResponseError",
    "TokenLimitExceededError",
    "VendorReportedError",
    "HttpStatusError",
    "BadRequestError",
    "AuthenticationError",
    "AuthorizationError",
    "EndpointNotFoundError",
    "RateLimitExceededError",
    "ServiceUnavailableError",
    "TransportFailureError",
    "error_for_status",
    "classify_exception",
    "unwrap_async_error",
]
