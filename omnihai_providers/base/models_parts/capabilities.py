"""
Capability flags attached to a resolved service (provider + model).

Adapters query these flags directly before building a payload and fail fast
with :class:`~omnihai_providers.base.errors.CapabilityUnsupportedError` when a
requested feature is off.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class ServiceCapabilities:
    """Boolean feature flags for one vendor/model combination.

    Attributes:
        streaming: Server-sent-events chat streaming.
        file_upload: Non-image attachments via the vendor's files API.
        structured_output: JSON Schema constrained responses.
        responses_api: OpenAI ``responses`` endpoint instead of ``chat/completions``.
        native_moderation: OpenAI ``moderations`` endpoint.
        image_generation: Text-to-image endpoint.
        image_analysis: Image attachments in chat input.
    """

    streaming: bool = False
    file_upload: bool = False
    structured_output: bool = False
    responses_api: bool = False
    native_moderation: bool = False
    image_generation: bool = False
    image_analysis: bool = True

    def with_overrides(self, **flags: Any) -> "ServiceCapabilities":
        """Return a copy with the given flags replaced; unknown names raise ``TypeError``."""
        return replace(self, **{k: bool(v) for k, v in flags.items()})


__all__ = ["ServiceCapabilities"]
