"""Ollama ``api/chat`` adapter (local models, no API key, no streaming)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from ..base.adapters import (
    check_chat_capabilities,
    is_blank,
    parse_chat_response,
    parse_file_response,
    plain_history,
    unsupported_feature,
)
from ..base.errors import CapabilityUnsupportedError
from ..base.models import (
    AIModelVersion,
    Attachment,
    ChatInput,
    ChatOptions,
    DEFAULT_TOP_P,
    GenerateImageOptions,
    ServiceCapabilities,
    ServiceContext,
)
from ..base.streaming import StreamEvent, TokenCallback

LLAMA_4 = AIModelVersion("llama", 4)

CONTENT_PATHS = ("message.content",)

_VISION_MODEL_HINTS = ("vision", "llava", "gemma")


def ollama_capabilities(model_name: str) -> ServiceCapabilities:
    name = model_name.lower()
    return ServiceCapabilities(
        structured_output=True,
        image_analysis=AIModelVersion.of(model_name).gte(LLAMA_4) or any(hint in name for hint in _VISION_MODEL_HINTS),
    )


@dataclass(frozen=True)
class OllamaAdapter:
    provider: str = "ollama"

    def capabilities(self, model_name: str) -> ServiceCapabilities:
        return ollama_capabilities(model_name)

    def request_headers(self, service: ServiceContext) -> Dict[str, str]:
        return {"Authorization": f"Bearer {service.api_key}"} if service.api_key else {}

    def chat_path(self, service: ServiceContext, streaming: bool) -> str:
        return "api/chat"

    def files_path(self, service: ServiceContext) -> str:
        raise unsupported_feature("File upload", service)

    def image_path(self, service: ServiceContext) -> str:
        raise unsupported_feature("Image generation", service)

    def build_chat_payload(
        self,
        service: ServiceContext,
        chat_input: ChatInput,
        options: ChatOptions,
        streaming: bool,
    ) -> Dict[str, Any]:
        check_chat_capabilities(service, chat_input, options, streaming)

        messages: List[Dict[str, Any]] = []
        if not is_blank(options.system_prompt):
            messages.append({"role": "system", "content": options.system_prompt})
        messages.extend(plain_history(chat_input))

        user: Dict[str, Any] = {"role": "user", "content": chat_input.message}
        if chat_input.images:
            user["images"] = [image.to_base64() for image in chat_input.images]
        messages.append(user)

        model_options: Dict[str, Any] = {"temperature": options.temperature}
        if options.max_tokens is not None:
            model_options["num_predict"] = options.max_tokens
        if options.top_p != DEFAULT_TOP_P:
            model_options["top_p"] = options.top_p

        payload: Dict[str, Any] = {
            "model": service.model_name,
            "messages": messages,
            "options": model_options,
            "stream": False,
        }
        if options.json_schema is not None:
            payload["format"] = options.json_schema
        return payload

    def chat_response_content_paths(self) -> Sequence[str]:
        return CONTENT_PATHS

    def parse_chat_response(self, body: str) -> str:
        return parse_chat_response(body, CONTENT_PATHS)

    def process_chat_stream_event(self, service: ServiceContext, event: StreamEvent, on_token: TokenCallback) -> bool:
        raise unsupported_feature("Streaming", service)

    def file_upload_metadata(self, service: ServiceContext, attachment: Attachment) -> Dict[str, str]:
        return {}

    def parse_file_response(self, body: str) -> str:
        return parse_file_response(body)

    def build_image_payload(self, service: ServiceContext, prompt: str, options: GenerateImageOptions) -> Dict[str, Any]:
        raise unsupported_feature("Image generation", service)

    def parse_image_response(self, body: str) -> bytes:
        raise CapabilityUnsupportedError("Image generation is not supported by Ollama", provider=self.provider)


def create_adapter() -> OllamaAdapter:
    return OllamaAdapter()


__all__ = ["OllamaAdapter", "ollama_capabilities", "create_adapter"]
