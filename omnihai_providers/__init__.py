"""omnihai_providers package

One chat/moderation/image vocabulary over several AI vendors' HTTP APIs.

Purpose:
    Callers build an :class:`AIService` for a provider id and talk to it in
    normalized terms; protocol adapters translate to and from each vendor's
    wire format (OpenAI, Anthropic, Google, Ollama, OpenRouter, Meta,
    Mistral).

Public API (re-exported):
    - Version: ``__version__``
    - Service: :class:`AIService`, :func:`create`
    - Values: :class:`ChatInput`, :class:`ChatOptions`, :class:`Attachment`,
      :class:`ModerationOptions`, :class:`GenerateImageOptions`
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode` and subclasses
"""

from typing import Any

from .base.errors import (
    CapabilityUnsupportedError,
    ErrorCode,
    MalformedResponseError,
    ProviderError,
    TokenLimitExceededError,
    VendorReportedError,
)
from .base.factory import AdapterFactory, UnknownProviderError
from .base.models import (
    Attachment,
    ChatInput,
    ChatOptions,
    GenerateImageOptions,
    HistoryMessage,
    ModerationOptions,
    ModerationResult,
    Role,
)
from .service import AIService

__version__ = "0.1.0"


def create(provider_name: str, **kwargs: Any) -> AIService:
    """Return an :class:`AIService` for ``provider_name``.

    Keyword arguments are passed to :class:`AIService` (``model``,
    ``api_key``, ``base_url``, ``system_message``, ``transport``,
    ``capabilities``).
    """
    return AIService(provider_name, **kwargs)


__all__ = [
    # Version
    "__version__",
    # Service
    "AIService",
    "create",
    "AdapterFactory",
    "UnknownProviderError",
    # Values
    "Attachment",
    "ChatInput",
    "ChatOptions",
    "GenerateImageOptions",
    "HistoryMessage",
    "ModerationOptions",
    "ModerationResult",
    "Role",
    # Exceptions
    "ErrorCode",
    "ProviderError",
    "CapabilityUnsupportedError",
    "MalformedResponseError",
    "TokenLimitExceededError",
    "VendorReportedError",
]
