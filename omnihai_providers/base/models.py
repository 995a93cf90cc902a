"""
Provider-agnostic value objects public surface.

This module re-exports the implementations under
``omnihai_providers.base.models_parts`` so callers have one import path.
"""

from .models_parts.capabilities import ServiceCapabilities
from .models_parts.chat_input import (
    Attachment,
    ChatInput,
    ChatInputBuilder,
    HistoryMessage,
    Role,
    UploadedFile,
)
from .models_parts.chat_options import (
    CREATIVE_TEMPERATURE,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_P,
    DETERMINISTIC_TEMPERATURE,
    ChatOptions,
)
from .models_parts.image_options import GenerateImageOptions
from .models_parts.model_version import AIModelVersion
from .models_parts.moderation import (
    ALL_CATEGORIES,
    OPENAI_NATIVE_CATEGORIES,
    ModerationCategory,
    ModerationOptions,
    ModerationResult,
)
from .models_parts.service_context import ServiceContext

__all__ = [
    "ServiceCapabilities",
    "Attachment",
    "ChatInput",
    "ChatInputBuilder",
    "HistoryMessage",
    "Role",
    "UploadedFile",
    "ChatOptions",
    "DEFAULT_TEMPERATURE",
    "CREATIVE_TEMPERATURE",
    "DETERMINISTIC_TEMPERATURE",
    "DEFAULT_TOP_P",
    "GenerateImageOptions",
    "AIModelVersion",
    "ModerationCategory",
    "ModerationOptions",
    "ModerationResult",
    "OPENAI_NATIVE_CATEGORIES",
    "ALL_CATEGORIES",
    "ServiceContext",
]
