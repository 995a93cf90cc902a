"""
Resolved service metadata handed to protocol adapters.

The context is immutable and safe to share across threads. It carries what an
adapter needs to know about the target service: which provider and model,
which capabilities are on, and how to upload a file when the payload must
reference an uploaded file by id.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Callable, Optional, TYPE_CHECKING

from .capabilities import ServiceCapabilities
from .model_version import AIModelVersion

if TYPE_CHECKING:
    from .chat_input import Attachment


def _no_upload(attachment: "Attachment") -> str:
    raise RuntimeError("No upload collaborator configured for this service")


@dataclass(frozen=True)
class ServiceContext:
    """What an adapter knows about the service it builds payloads for.

    Attributes:
        provider: Canonical provider id (``"openai"``).
        provider_name: Display name used in error messages (``"OpenAI"``).
        model_name: Full model identifier sent on the wire.
        capabilities: Feature flags for this provider/model.
        upload: Upload collaborator returning an opaque file handle.
        api_key: Vendor API key; adapters that authenticate through the query
            string (Google) read it when building paths.
    """

    provider: str
    provider_name: str
    model_name: str
    capabilities: ServiceCapabilities = field(default_factory=ServiceCapabilities)
    upload: Callable[["Attachment"], str] = field(default=_no_upload, repr=False, compare=False)
    api_key: Optional[str] = field(default=None, repr=False, compare=False)

    @cached_property
    def model_version(self) -> AIModelVersion:
        return AIModelVersion.of(self.model_name)

    @property
    def name(self) -> str:
        """Human readable ``"<provider name> (<model>)"`` label."""
        return f"{self.provider_name} ({self.model_name})"


__all__ = ["ServiceContext"]
