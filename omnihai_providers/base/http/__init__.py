"""HTTP utilities package for providers.

Exposes the transport contract, pooled httpx clients and the default
``httpx`` transport.
"""

from .client import close_all_clients, get_httpx_client
from .transport import UPLOADED_FILE_NAME_PREFIX, HttpxTransport, is_retryable
from .types import APPLICATION_JSON, TEXT_EVENT_STREAM, HttpRequest, HttpResult, Transport

__all__ = [
    "get_httpx_client",
    "close_all_clients",
    "HttpxTransport",
    "UPLOADED_FILE_NAME_PREFIX",
    "is_retryable",
    "APPLICATION_JSON",
    "TEXT_EVENT_STREAM",
    "HttpRequest",
    "HttpResult",
    "Transport",
]
