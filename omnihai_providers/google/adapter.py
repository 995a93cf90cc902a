"""Google Gemini (Generative Language API) adapter.

The API key travels in the ``key`` query parameter, so every path built here
embeds it; the transport and error messages strip query strings before
logging. The assistant role is called ``model`` on this API.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence
from urllib.parse import quote

from ..base.adapters import (
    check_chat_capabilities,
    check_supports_image_generation,
    emit_token,
    is_blank,
    parse_chat_response,
    parse_file_response,
    parse_image_response,
    try_parse_event_data_json,
)
from ..base.errors import TokenLimitExceededError, VendorReportedError
from ..base.json_path import find_by_path
from ..base.models import (
    AIModelVersion,
    Attachment,
    ChatInput,
    ChatOptions,
    DEFAULT_TOP_P,
    GenerateImageOptions,
    HistoryMessage,
    Role,
    ServiceCapabilities,
    ServiceContext,
)
from ..base.streaming import StreamEvent, StreamEventType, TokenCallback

GEMINI_2 = AIModelVersion("gemini", 2)

CONTENT_PATHS = ("candidates[0].content.parts[0].text",)
IMAGE_CONTENT_PATHS = ("candidates[0].content.parts[0].inlineData.data", "candidates[0].content.parts[*].inlineData.data")
FILE_ID_PATHS = ("file.uri",)

_MODEL_ROLE = "model"


def google_capabilities(model_name: str) -> ServiceCapabilities:
    version = AIModelVersion.of(model_name)
    gemini_2 = version.gte(GEMINI_2)
    return ServiceCapabilities(
        streaming=True,
        file_upload=True,
        structured_output=gemini_2,
        image_generation=gemini_2 or "image" in model_name.lower(),
        image_analysis=True,
    )


def _key_query(service: ServiceContext) -> str:
    return f"key={quote(service.api_key or '', safe='')}"


def _file_part(mime_type: str, file_uri: str) -> Dict[str, Any]:
    return {"file_data": {"mime_type": mime_type, "file_uri": file_uri}}


@dataclass(frozen=True)
class GoogleAdapter:
    provider: str = "google"

    def capabilities(self, model_name: str) -> ServiceCapabilities:
        return google_capabilities(model_name)

    def request_headers(self, service: ServiceContext) -> Dict[str, str]:
        return {}

    def chat_path(self, service: ServiceContext, streaming: bool) -> str:
        model = quote(service.model_name, safe="")
        if streaming:
            return f"models/{model}:streamGenerateContent?alt=sse&{_key_query(service)}"
        return f"models/{model}:generateContent?{_key_query(service)}"

    def files_path(self, service: ServiceContext) -> str:
        return f"../upload/v1beta/files?{_key_query(service)}"

    def image_path(self, service: ServiceContext) -> str:
        return self.chat_path(service, streaming=False)

    def build_chat_payload(
        self,
        service: ServiceContext,
        chat_input: ChatInput,
        options: ChatOptions,
        streaming: bool,
    ) -> Dict[str, Any]:
        check_chat_capabilities(service, chat_input, options, streaming)
        payload: Dict[str, Any] = {}

        if not is_blank(options.system_prompt):
            payload["system_instruction"] = {"parts": [{"text": options.system_prompt}]}

        parts: List[Dict[str, Any]] = []
        if chat_input.images:
            parts.extend(
                {"inline_data": {"mime_type": image.mime_type, "data": image.to_base64()}} for image in chat_input.images
            )
        if chat_input.files:
            parts.extend(_file_part(file.mime_type, service.upload(file)) for file in chat_input.files)
        parts.append({"text": chat_input.message})

        contents = [self._history_content(turn) for turn in chat_input.history]
        contents.append({"role": "user", "parts": parts})
        payload["contents"] = contents

        generation_config: Dict[str, Any] = {"temperature": options.temperature}
        if options.max_tokens is not None:
            generation_config["maxOutputTokens"] = options.max_tokens
        if options.top_p != DEFAULT_TOP_P:
            generation_config["topP"] = options.top_p
        if options.json_schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = options.json_schema
        payload["generationConfig"] = generation_config

        return payload

    @staticmethod
    def _history_content(turn: HistoryMessage) -> Dict[str, Any]:
        role = _MODEL_ROLE if turn.role is Role.ASSISTANT else turn.role.value
        parts = [_file_part(file.mime_type, file.id) for file in turn.uploaded_files]
        parts.append({"text": turn.content})
        return {"role": role, "parts": parts}

    def chat_response_content_paths(self) -> Sequence[str]:
        return CONTENT_PATHS

    def parse_chat_response(self, body: str) -> str:
        return parse_chat_response(body, CONTENT_PATHS)

    def process_chat_stream_event(self, service: ServiceContext, event: StreamEvent, on_token: TokenCallback) -> bool:
        if event.type is not StreamEventType.DATA:
            return True

        def _handle(document: Dict[str, Any]) -> bool:
            if "error" in document:
                raise VendorReportedError("Error event returned", event.value)
            emit_token(find_by_path(document, "candidates[0].content.parts[0].text"), on_token)
            finish_reason = find_by_path(document, "candidates[0].finishReason")
            if finish_reason == "MAX_TOKENS":
                raise TokenLimitExceededError()
            return finish_reason != "STOP"

        return try_parse_event_data_json(event.value, _handle)

    def file_upload_metadata(self, service: ServiceContext, attachment: Attachment) -> Dict[str, str]:
        return {}

    def parse_file_response(self, body: str) -> str:
        return parse_file_response(body, FILE_ID_PATHS)

    def build_image_payload(self, service: ServiceContext, prompt: str, options: GenerateImageOptions) -> Dict[str, Any]:
        check_supports_image_generation(service)
        if is_blank(prompt):
            raise ValueError("prompt may not be blank")
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseModalities": ["IMAGE"],
                "imageConfig": {"aspectRatio": options.aspect_ratio},
            },
        }

    def parse_image_response(self, body: str) -> bytes:
        return parse_image_response(body, IMAGE_CONTENT_PATHS)


def create_adapter() -> GoogleAdapter:
    return GoogleAdapter()


__all__ = ["GoogleAdapter", "google_capabilities", "create_adapter", "GEMINI_2"]
