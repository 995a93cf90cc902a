"""Anthropic Messages API adapter.

Key differences from the OpenAI shape:

- the system prompt is a top-level ``system`` string;
- ``max_tokens`` is mandatory, defaulting to 4096 up to Claude 3.0 and 8192
  after that;
- images are inline base64 ``image`` blocks, files are uploaded and referenced
  as ``document`` blocks;
- the stream names every event, ending with ``message_stop``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from ..base.adapters import (
    check_chat_capabilities,
    emit_token,
    is_blank,
    parse_chat_response,
    parse_file_response,
    try_parse_event_data_json,
    unsupported_feature,
)
from ..base.errors import CapabilityUnsupportedError, TokenLimitExceededError, VendorReportedError
from ..base.json_path import find_by_path
from ..base.models import (
    AIModelVersion,
    Attachment,
    ChatInput,
    ChatOptions,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_P,
    GenerateImageOptions,
    HistoryMessage,
    Role,
    ServiceCapabilities,
    ServiceContext,
)
from ..base.schema import strict_schema
from ..base.streaming import StreamEvent, StreamEventType, TokenCallback

ANTHROPIC_VERSION = "2023-06-01"
BETA_FILES_API = "files-api-2025-04-14"
BETA_STRUCTURED_OUTPUTS = "structured-outputs-2025-11-13"

CLAUDE_3 = AIModelVersion("claude", 3)
CLAUDE_OPUS_4_1 = AIModelVersion("claude-opus", 4, 1)
CLAUDE_SONNET_4_5 = AIModelVersion("claude-sonnet", 4, 5)

DEFAULT_MAX_TOKENS_CLAUDE_3_0 = 4096
DEFAULT_MAX_TOKENS_CLAUDE_3_X = 8192

CONTENT_PATHS = ("content[0].text",)

_STOP_EVENTS = ("message_stop", "content_block_stop")


def anthropic_capabilities(model_name: str) -> ServiceCapabilities:
    version = AIModelVersion.of(model_name)
    claude_3 = version.gte(CLAUDE_3)
    return ServiceCapabilities(
        streaming=claude_3,
        file_upload=claude_3,
        structured_output=version.gte(CLAUDE_OPUS_4_1, CLAUDE_SONNET_4_5),
        image_analysis=True,
    )


def _image_block(image: Attachment) -> Dict[str, Any]:
    return {
        "type": "image",
        "source": {"type": "base64", "media_type": image.mime_type, "data": image.to_base64()},
    }


def _document_block(file_id: str) -> Dict[str, Any]:
    return {"type": "document", "source": {"type": "file", "file_id": file_id}}


@dataclass(frozen=True)
class AnthropicAdapter:
    provider: str = "anthropic"

    def capabilities(self, model_name: str) -> ServiceCapabilities:
        return anthropic_capabilities(model_name)

    def request_headers(self, service: ServiceContext) -> Dict[str, str]:
        headers = {"anthropic-version": ANTHROPIC_VERSION}
        if service.api_key:
            headers["x-api-key"] = service.api_key
        betas = []
        if service.capabilities.file_upload:
            betas.append(BETA_FILES_API)
        if service.capabilities.structured_output:
            betas.append(BETA_STRUCTURED_OUTPUTS)
        if betas:
            headers["anthropic-beta"] = ",".join(betas)
        return headers

    def chat_path(self, service: ServiceContext, streaming: bool) -> str:
        return "messages"

    def files_path(self, service: ServiceContext) -> str:
        return "files"

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
        max_tokens = options.max_tokens
        if max_tokens is None:
            max_tokens = (
                DEFAULT_MAX_TOKENS_CLAUDE_3_0 if service.model_version.lte(CLAUDE_3) else DEFAULT_MAX_TOKENS_CLAUDE_3_X
            )
        payload: Dict[str, Any] = {"model": service.model_name, "max_tokens": max_tokens}

        if not is_blank(options.system_prompt):
            payload["system"] = options.system_prompt

        content: List[Dict[str, Any]] = []
        if chat_input.images:
            content.extend(_image_block(image) for image in chat_input.images)
        if chat_input.files:
            content.extend(_document_block(service.upload(file)) for file in chat_input.files)
        content.append({"type": "text", "text": chat_input.message})

        messages = [self._history_message(turn) for turn in chat_input.history]
        messages.append({"role": "user", "content": content})
        payload["messages"] = messages

        if streaming:
            payload["stream"] = True

        if options.temperature != DEFAULT_TEMPERATURE:
            payload["temperature"] = options.temperature

        if options.top_p != DEFAULT_TOP_P:
            payload["top_p"] = options.top_p

        if options.json_schema is not None:
            payload["output_format"] = {"type": "json_schema", "schema": strict_schema(options.json_schema)}

        return payload

    @staticmethod
    def _history_message(turn: HistoryMessage) -> Dict[str, Any]:
        if not turn.uploaded_files or turn.role is not Role.USER:
            return {"role": turn.role.value, "content": turn.content}
        content = [_document_block(file.id) for file in turn.uploaded_files]
        content.append({"type": "text", "text": turn.content})
        return {"role": turn.role.value, "content": content}

    def chat_response_content_paths(self) -> Sequence[str]:
        return CONTENT_PATHS

    def parse_chat_response(self, body: str) -> str:
        return parse_chat_response(body, CONTENT_PATHS)

    def process_chat_stream_event(self, service: ServiceContext, event: StreamEvent, on_token: TokenCallback) -> bool:
        if event.type is StreamEventType.EVENT:
            if event.value == "max_tokens":
                raise TokenLimitExceededError()
            return event.value not in _STOP_EVENTS

        if event.type is not StreamEventType.DATA:
            return True

        def _handle(document: Dict[str, Any]) -> bool:
            event_type = document.get("type")
            if event_type == "content_block_delta":
                emit_token(find_by_path(document, "delta.text"), on_token)
            elif event_type == "message_delta" and find_by_path(document, "delta.stop_reason") == "max_tokens":
                raise TokenLimitExceededError()
            elif event_type == "error":
                raise VendorReportedError("Error event returned", event.value)
            return True

        return try_parse_event_data_json(event.value, _handle)

    def file_upload_metadata(self, service: ServiceContext, attachment: Attachment) -> Dict[str, str]:
        return {}

    def parse_file_response(self, body: str) -> str:
        return parse_file_response(body)

    def build_image_payload(self, service: ServiceContext, prompt: str, options: GenerateImageOptions) -> Dict[str, Any]:
        raise unsupported_feature("Image generation", service)

    def parse_image_response(self, body: str) -> bytes:
        raise CapabilityUnsupportedError("Image generation is not supported by Anthropic", provider=self.provider)


def create_adapter() -> AnthropicAdapter:
    return AnthropicAdapter()


__all__ = [
    "AnthropicAdapter",
    "anthropic_capabilities",
    "create_adapter",
    "CLAUDE_3",
    "CLAUDE_OPUS_4_1",
    "CLAUDE_SONNET_4_5",
]
