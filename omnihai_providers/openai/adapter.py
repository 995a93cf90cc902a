"""OpenAI protocol adapter.

Speaks both OpenAI surfaces:

- the Responses API (``responses``) for models that support it: system prompt
  in ``instructions``, turns in ``input``, token cap in ``max_output_tokens``;
- the legacy chat completions API (``chat/completions``): everything in
  ``messages``, token cap in ``max_completion_tokens`` from GPT-5 on and in
  ``max_tokens`` before that.

The same adapter, configured differently, serves the OpenAI compatible
vendors (OpenRouter, Meta, Mistral); see :func:`openai_compatible`.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from ..base.adapters import (
    check_chat_capabilities,
    check_supports_image_generation,
    is_blank,
    parse_chat_response,
    parse_file_response,
    parse_image_response,
)
from ..base.models import (
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
from ..base.schema import strict_schema
from ..base.streaming import StreamEvent, TokenCallback
from .capabilities import GPT_5, openai_capabilities
from .stream_helpers import process_chat_completions_event, process_responses_event

FileParts = Callable[[ServiceContext, Sequence[Attachment], bool], List[Dict[str, Any]]]

CHAT_CONTENT_PATHS: Tuple[str, ...] = ("output[*].content[*].text", "choices[0].message.content")
IMAGE_CONTENT_PATHS: Tuple[str, ...] = ("output[*].content[*].image_base64", "data[0].b64_json")
STRUCTURED_OUTPUT_NAME = "response"


def uploaded_file_parts(service: ServiceContext, files: Sequence[Attachment], responses_api: bool) -> List[Dict[str, Any]]:
    """Upload every file and reference it by id."""
    return [file_reference_part(service.upload(file), responses_api) for file in files]


def file_reference_part(file_id: str, responses_api: bool) -> Dict[str, Any]:
    if responses_api:
        return {"type": "input_file", "file_id": file_id}
    return {"type": "file", "file": {"file_id": file_id}}


def text_part(text: str, responses_api: bool) -> Dict[str, Any]:
    return {"type": "input_text" if responses_api else "text", "text": text}


def image_part(image: Attachment, responses_api: bool) -> Dict[str, Any]:
    if responses_api:
        return {"type": "input_image", "image_url": image.to_data_uri()}
    return {"type": "image_url", "image_url": {"url": image.to_data_uri()}}


def token_limit_field(service: ServiceContext) -> str:
    if service.capabilities.responses_api:
        return "max_output_tokens"
    return "max_completion_tokens" if service.model_version.gte(GPT_5) else "max_tokens"


def structured_output_fields(schema: Mapping[str, Any], responses_api: bool) -> Dict[str, Any]:
    strict = strict_schema(dict(schema))
    if responses_api:
        return {"text": {"format": {"type": "json_schema", "name": STRUCTURED_OUTPUT_NAME, "strict": True, "schema": strict}}}
    return {
        "response_format": {
            "type": "json_schema",
            "json_schema": {"name": STRUCTURED_OUTPUT_NAME, "strict": True, "schema": strict},
        }
    }


@dataclass(frozen=True)
class OpenAIAdapter:
    """Stateless adapter for OpenAI and OpenAI compatible chat APIs.

    Attributes:
        provider: Provider id this instance serves.
        capabilities_for: Capability table for a model name.
        content_paths: Extraction paths for non-streaming chat responses.
        file_parts: Turns non-image attachments into content parts.
        upload_purpose: ``purpose`` form field sent with uploads.
    """

    provider: str = "openai"
    capabilities_for: Callable[[str], ServiceCapabilities] = field(default=openai_capabilities, repr=False)
    content_paths: Tuple[str, ...] = CHAT_CONTENT_PATHS
    file_parts: FileParts = field(default=uploaded_file_parts, repr=False)
    upload_purpose: str = "user_data"

    def capabilities(self, model_name: str) -> ServiceCapabilities:
        return self.capabilities_for(model_name)

    # -- routing -------------------------------------------------------------

    def request_headers(self, service: ServiceContext) -> Dict[str, str]:
        return {"Authorization": f"Bearer {service.api_key}"} if service.api_key else {}

    def chat_path(self, service: ServiceContext, streaming: bool) -> str:
        return "responses" if service.capabilities.responses_api else "chat/completions"

    def files_path(self, service: ServiceContext) -> str:
        return "files"

    def image_path(self, service: ServiceContext) -> str:
        return "images/generations"

    # -- chat ----------------------------------------------------------------

    def build_chat_payload(
        self,
        service: ServiceContext,
        chat_input: ChatInput,
        options: ChatOptions,
        streaming: bool,
    ) -> Dict[str, Any]:
        check_chat_capabilities(service, chat_input, options, streaming)
        responses_api = service.capabilities.responses_api
        payload: Dict[str, Any] = {"model": service.model_name}

        if options.max_tokens is not None:
            payload[token_limit_field(service)] = options.max_tokens

        messages: List[Dict[str, Any]] = []
        if not is_blank(options.system_prompt):
            if responses_api:
                payload["instructions"] = options.system_prompt
            else:
                messages.append({"role": "system", "content": options.system_prompt})
        messages.extend(self._history_message(service, turn, responses_api) for turn in chat_input.history)
        messages.append({"role": "user", "content": self._user_content(service, chat_input, responses_api)})
        payload["input" if responses_api else "messages"] = messages

        if streaming:
            payload["stream"] = True

        # GPT-5 rejects temperature unless reasoning effort is set; other
        # versions, including GPT-5 minor releases, still take it
        if service.model_version.ne(GPT_5):
            payload["temperature"] = options.temperature

        if options.top_p != DEFAULT_TOP_P:
            payload["top_p"] = options.top_p

        if options.json_schema is not None:
            payload.update(structured_output_fields(options.json_schema, responses_api))

        return payload

    def _user_content(self, service: ServiceContext, chat_input: ChatInput, responses_api: bool) -> Any:
        if not chat_input.images and not chat_input.files:
            return chat_input.message
        parts = self.file_parts(service, chat_input.files, responses_api)
        parts.append(text_part(chat_input.message, responses_api))
        parts.extend(image_part(image, responses_api) for image in chat_input.images)
        return parts

    def _history_message(self, service: ServiceContext, turn: HistoryMessage, responses_api: bool) -> Dict[str, Any]:
        role = turn.role.value
        if not turn.uploaded_files or turn.role is not Role.USER:
            return {"role": role, "content": turn.content}
        parts = [file_reference_part(file.id, responses_api) for file in turn.uploaded_files]
        parts.append(text_part(turn.content, responses_api))
        return {"role": role, "content": parts}

    def chat_response_content_paths(self) -> Sequence[str]:
        return self.content_paths

    def parse_chat_response(self, body: str) -> str:
        return parse_chat_response(body, self.content_paths)

    def process_chat_stream_event(self, service: ServiceContext, event: StreamEvent, on_token: TokenCallback) -> bool:
        if service.capabilities.responses_api:
            return process_responses_event(event, on_token)
        return process_chat_completions_event(event, on_token)

    # -- files ---------------------------------------------------------------

    def file_upload_metadata(self, service: ServiceContext, attachment: Attachment) -> Dict[str, str]:
        return {"purpose": self.upload_purpose}

    def parse_file_response(self, body: str) -> str:
        return parse_file_response(body)

    # -- images --------------------------------------------------------------

    def build_image_payload(self, service: ServiceContext, prompt: str, options: GenerateImageOptions) -> Dict[str, Any]:
        check_supports_image_generation(service)
        if is_blank(prompt):
            raise ValueError("prompt may not be blank")
        return {
            "model": service.model_name,
            "prompt": prompt,
            "n": 1,
            "size": options.size,
            "quality": options.quality,
            "output_format": options.output_format,
        }

    def parse_image_response(self, body: str) -> bytes:
        return parse_image_response(body, IMAGE_CONTENT_PATHS)


def openai_compatible(
    provider: str,
    capabilities_for: Callable[[str], ServiceCapabilities],
    **overrides: Any,
) -> OpenAIAdapter:
    """Return an :class:`OpenAIAdapter` configured for an OpenAI compatible vendor."""
    return replace(OpenAIAdapter(), provider=provider, capabilities_for=capabilities_for, **overrides)


def create_adapter() -> OpenAIAdapter:
    return OpenAIAdapter()


__all__ = [
    "OpenAIAdapter",
    "CHAT_CONTENT_PATHS",
    "IMAGE_CONTENT_PATHS",
    "create_adapter",
    "openai_compatible",
    "file_reference_part",
    "image_part",
    "text_part",
    "token_limit_field",
    "structured_output_fields",
    "uploaded_file_parts",
]
