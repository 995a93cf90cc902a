"""Transport contract between the service façade and the network.

Adapters never touch the network. The façade turns adapter output into an
:class:`HttpRequest` and hands it to a :class:`Transport`, which returns an
:class:`HttpResult` or a lazy iterator of raw text lines (for SSE streams).
Non-2xx responses are raised by the transport as
:class:`~omnihai_providers.base.errors.HttpStatusError` subclasses.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Optional, Protocol, runtime_checkable

from ..models import Attachment

APPLICATION_JSON = "application/json"
TEXT_EVENT_STREAM = "text/event-stream"


@dataclass(frozen=True)
class HttpRequest:
    """One outbound request.

    Attributes:
        method: HTTP method.
        url: Absolute URL, possibly carrying a query string (Google passes the
            API key there, so never log it unstripped).
        headers: Vendor headers (auth, API version); ``Accept`` is derived.
        json: JSON body, ``None`` for bodiless requests.
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    json: Optional[Dict[str, Any]] = None

    @property
    def safe_url(self) -> str:
        """URL without the query string, for logs and error messages."""
        return self.url.split("?", 1)[0]


@dataclass(frozen=True)
class HttpResult:
    status_code: int
    body: str


@runtime_checkable
class Transport(Protocol):
    """Network collaborator.

    Implementations own timeouts, retries and connection pooling.
    """

    def send(self, request: HttpRequest) -> HttpResult: ...

    def open_stream(self, request: HttpRequest) -> Iterator[str]:
        """Return the response body as lazily read text lines.

        Closing the iterator releases the connection.
        """
        ...

    def upload(self, request: HttpRequest, attachment: Attachment) -> HttpResult:
        """POST ``attachment`` plus its metadata as ``multipart/form-data``."""
        ...


__all__ = [
    "APPLICATION_JSON",
    "TEXT_EVENT_STREAM",
    "HttpRequest",
    "HttpResult",
    "Transport",
]
