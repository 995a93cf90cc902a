"""
Protocol every vendor adapter implements.

Adapters are stateless, value-like strategy objects selected by provider id
through :class:`~omnihai_providers.base.factory.AdapterFactory`. Behaviour
shared between vendors lives in the free functions of this package, not in a
base class.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Protocol, Sequence, runtime_checkable

from ..models import (
    Attachment,
    ChatInput,
    ChatOptions,
    GenerateImageOptions,
    ServiceCapabilities,
    ServiceContext,
)
from ..streaming import StreamEvent, TokenCallback


@runtime_checkable
class ProtocolAdapter(Protocol):
    """Translate normalized chat input to one vendor's wire format and back."""

    provider: str

    def capabilities(self, model_name: str) -> ServiceCapabilities:
        """Capability flags for ``model_name`` on this vendor."""
        ...

    def request_headers(self, service: ServiceContext) -> Mapping[str, str]: ...

    def chat_path(self, service: ServiceContext, streaming: bool) -> str: ...

    def build_chat_payload(
        self,
        service: ServiceContext,
        chat_input: ChatInput,
        options: ChatOptions,
        streaming: bool,
    ) -> Dict[str, Any]:
        """Build the request body.

        Raises:
            CapabilityUnsupportedError: When the input or options need a
                feature the service lacks; raised before any network call.
        """
        ...

    def chat_response_content_paths(self) -> Sequence[str]:
        """Ordered, non-empty extraction paths for the response text."""
        ...

    def parse_chat_response(self, body: str) -> str: ...

    def process_chat_stream_event(
        self,
        service: ServiceContext,
        event: StreamEvent,
        on_token: TokenCallback,
    ) -> bool:
        """Handle one streamed event; ``False`` once the vendor's end marker arrived."""
        ...

    def files_path(self, service: ServiceContext) -> str: ...

    def file_upload_metadata(self, service: ServiceContext, attachment: Attachment) -> Dict[str, str]: ...

    def parse_file_response(self, body: str) -> str: ...

    def image_path(self, service: ServiceContext) -> str: ...

    def build_image_payload(
        self,
        service: ServiceContext,
        prompt: str,
        options: GenerateImageOptions,
    ) -> Dict[str, Any]: ...

    def parse_image_response(self, body: str) -> bytes: ...


__all__ = ["ProtocolAdapter"]
