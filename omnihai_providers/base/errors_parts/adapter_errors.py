"""
Adapter-level error types.

These cover failures detected while building a request or interpreting a
response, independent of the transport:

- :class:`CapabilityUnsupportedError`: the active service lacks a feature
  (streaming, structured output, file upload, image generation). Raised before
  any network interaction.
- :class:`MalformedResponseError`: the body is not JSON, or holds no content at
  any of the declared extraction paths.
- :class:`VendorReportedError`: the body or a streamed event explicitly carries
  an error object.
- :class:`TokenLimitExceededError`: generation stopped because the token budget
  was exhausted.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class CapabilityUnsupportedError(ProviderError):
    """Raised when the service does not support a requested feature."""

    def __init__(self, message: str, *, provider: str = "", model: Optional[str] = None) -> None:
        super().__init__(code=ErrorCode.UNSUPPORTED, message=message, provider=provider, model=model)


class MalformedResponseError(ProviderError):
    """Raised when a response body cannot be interpreted.

    ``message`` names the problem; the offending body is kept on ``response_body``.
    """

    def __init__(self, message: str, response_body: Optional[str] = None, *, raw: Optional[Exception] = None) -> None:
        super().__init__(
            code=ErrorCode.MALFORMED_RESPONSE,
            message=message,
            raw=raw,
        )
        self.response_body = response_body


class VendorReportedError(ProviderError):
    """Raised when the vendor explicitly reports an error in the response.

    ``message`` is the vendor's own text (or ``"Error event returned"`` for a
    streamed error event); the raw body is kept on ``response_body``.
    """

    def __init__(self, message: str, response_body: Optional[str] = None) -> None:
        super().__init__(code=ErrorCode.VENDOR_ERROR, message=message)
        self.response_body = response_body


class TokenLimitExceededError(ProviderError):
    """Raised when the response was cut off by the maximum token limit."""

    def __init__(self, message: str = "Token limit exceeded; increase max tokens or shorten the input") -> None:
        super().__init__(code=ErrorCode.TOKEN_LIMIT, message=message)


__all__ = [
    "CapabilityUnsupportedError",
    "MalformedResponseError",
    "VendorReportedError",
    "TokenLimitExceededError",
]
