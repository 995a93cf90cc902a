"""
Providers Base Package

Exports the provider-agnostic pieces every vendor adapter and the service
façade are built from:

- Models: chat input, options, capabilities, model versions, moderation
- Adapters: the adapter protocol and the adapter factory
- Errors: the ``ProviderError`` taxonomy
- Streaming: SSE tokenizer and token pull loop
"""

from .adapters import ProtocolAdapter
from .errors import (
    CapabilityUnsupportedError,
    ErrorCode,
    MalformedResponseError,
    ProviderError,
    TokenLimitExceededError,
    VendorReportedError,
)
from .factory import AdapterFactory, UnknownProviderError
from .models import (
    AIModelVersion,
    Attachment,
    ChatInput,
    ChatOptions,
    GenerateImageOptions,
    HistoryMessage,
    ModerationCategory,
    ModerationOptions,
    ModerationResult,
    Role,
    ServiceCapabilities,
    ServiceContext,
    UploadedFile,
)
from .streaming import StreamEvent, StreamEventType, iter_sse_events, iter_stream_tokens
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    # Models
    "AIModelVersion",
    "Attachment",
    "ChatInput",
    "ChatOptions",
    "GenerateImageOptions",
    "HistoryMessage",
    "ModerationCategory",
    "ModerationOptions",
    "ModerationResult",
    "Role",
    "ServiceCapabilities",
    "ServiceContext",
    "UploadedFile",
    # Adapters
    "ProtocolAdapter",
    "AdapterFactory",
    "UnknownProviderError",
    # Errors
    "ErrorCode",
    "ProviderError",
    "CapabilityUnsupportedError",
    "MalformedResponseError",
    "TokenLimitExceededError",
    "VendorReportedError",
    # Streaming
    "StreamEvent",
    "StreamEventType",
    "iter_sse_events",
    "iter_stream_tokens",
    # Timeouts
    "TimeoutConfig",
    "get_timeout_config",
]
