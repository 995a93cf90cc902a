"""OpenAI adapter: Responses API vs chat completions payloads and stream grammars."""
from __future__ import annotations

import base64
import json
from typing import List, Optional

import pytest

from omnihai_providers.base.errors import (
    CapabilityUnsupportedError,
    TokenLimitExceededError,
    VendorReportedError,
)
from omnihai_providers.base.models import (
    Attachment,
    ChatInput,
    ChatOptions,
    GenerateImageOptions,
    HistoryMessage,
    Role,
    ServiceContext,
    UploadedFile,
)
from omnihai_providers.base.streaming import StreamEvent, consume_stream
from omnihai_providers.openai.adapter import OpenAIAdapter, create_adapter

ADAPTER: OpenAIAdapter = create_adapter()


def _service(model: str = "gpt-5-mini", uploads: Optional[List[Attachment]] = None, **overrides) -> ServiceContext:
    recorded = uploads if uploads is not None else []

    def upload(attachment: Attachment) -> str:
        recorded.append(attachment)
        return f"file-{len(recorded)}"

    caps = ADAPTER.capabilities(model).with_overrides(**overrides)
    return ServiceContext("openai", "OpenAI", model, caps, upload=upload, api_key="sk-unit")


def _stream(service: ServiceContext, events: List[StreamEvent]) -> str:
    return consume_stream(events, lambda e, cb: ADAPTER.process_chat_stream_event(service, e, cb), lambda _: None)


def test_responses_api_payload_for_gpt5():
    service = _service()
    options = ChatOptions(system_prompt="Be brief", max_tokens=64)
    payload = ADAPTER.build_chat_payload(service, ChatInput.of("Hi"), options, streaming=False)
    assert ADAPTER.chat_path(service, False) == "responses"  # nosec B101
    assert payload == {  # nosec B101
        "model": "gpt-5-mini",
        "max_output_tokens": 64,
        "instructions": "Be brief",
        "input": [{"role": "user", "content": "Hi"}],
    }


def test_chat_completions_payload_when_responses_api_is_off():
    service = _service(responses_api=False)
    options = ChatOptions(system_prompt="Be brief", max_tokens=64, top_p=0.9)
    payload = ADAPTER.build_chat_payload(service, ChatInput.of("Hi"), options, streaming=True)
    assert ADAPTER.chat_path(service, True) == "chat/completions"  # nosec B101
    assert payload["max_completion_tokens"] == 64  # nosec B101
    assert payload["messages"][0] == {"role": "system", "content": "Be brief"}  # nosec B101
    assert payload["stream"] is True  # nosec B101
    assert payload["top_p"] == 0.9  # nosec B101
    assert "temperature" not in payload  # nosec B101


def test_pre_gpt5_chat_completions_uses_max_tokens_and_temperature():
    service = _service("gpt-4o", responses_api=False)
    payload = ADAPTER.build_chat_payload(service, ChatInput.of("Hi"), ChatOptions(max_tokens=5), streaming=False)
    assert payload["max_tokens"] == 5  # nosec B101
    assert payload["temperature"] == 0.7  # nosec B101


def test_gpt5_minor_release_keeps_temperature():
    payload = ADAPTER.build_chat_payload(_service("gpt-5.1"), ChatInput.of("Hi"), ChatOptions.DETERMINISTIC, False)
    assert payload["temperature"] == 0.0  # nosec B101


def test_structured_output_is_strict_on_both_surfaces():
    schema = {"type": "object", "properties": {"a": {"type": "string"}}, "required": ["a"]}
    options = ChatOptions(json_schema=schema)
    responses = ADAPTER.build_chat_payload(_service(), ChatInput.of("x"), options, False)
    fmt = responses["text"]["format"]
    assert fmt["type"] == "json_schema" and fmt["strict"] is True  # nosec B101
    assert fmt["schema"]["additionalProperties"] is False  # nosec B101
    completions = ADAPTER.build_chat_payload(_service(responses_api=False), ChatInput.of("x"), options, False)
    assert completions["response_format"]["json_schema"]["schema"]["additionalProperties"] is False  # nosec B101
    assert "additionalProperties" not in schema  # nosec B101


def test_attachments_upload_files_and_inline_images(png_bytes, pdf_bytes):
    uploads: List[Attachment] = []
    service = _service(uploads=uploads)
    chat_input = ChatInput.builder().message("Compare").attach(pdf_bytes, png_bytes).build()
    payload = ADAPTER.build_chat_payload(service, chat_input, ChatOptions.DEFAULT, False)
    content = payload["input"][-1]["content"]
    assert [part["type"] for part in content] == ["input_file", "input_text", "input_image"]  # nosec B101
    assert content[0]["file_id"] == "file-1"  # nosec B101
    assert content[2]["image_url"].startswith("data:image/png;base64,")  # nosec B101
    assert [a.file_name for a in uploads] == ["file1.pdf"]  # nosec B101


def test_chat_completions_attachment_parts(png_bytes, pdf_bytes):
    service = _service(responses_api=False)
    chat_input = ChatInput.builder().message("Compare").attach(pdf_bytes, png_bytes).build()
    content = ADAPTER.build_chat_payload(service, chat_input, ChatOptions.DEFAULT, False)["messages"][-1]["content"]
    assert content[0] == {"type": "file", "file": {"file_id": "file-1"}}  # nosec B101
    assert content[1] == {"type": "text", "text": "Compare"}  # nosec B101
    assert content[2]["type"] == "image_url"  # nosec B101


def test_history_references_uploaded_files():
    history = [
        HistoryMessage(Role.USER, "Read this", (UploadedFile("file-9", "application/pdf"),)),
        HistoryMessage(Role.ASSISTANT, "Done"),
    ]
    payload = ADAPTER.build_chat_payload(_service(), ChatInput.of("Summarize").with_history(history), ChatOptions(), False)
    first, second, last = payload["input"]
    assert first["content"][0] == {"type": "input_file", "file_id": "file-9"}  # nosec B101
    assert second == {"role": "assistant", "content": "Done"}  # nosec B101
    assert last["content"] == "Summarize"  # nosec B101


@pytest.mark.parametrize(
    "overrides, build",
    [
        ({"streaming": False}, lambda s: ADAPTER.build_chat_payload(s, ChatInput.of("x"), ChatOptions(), True)),
        (
            {"structured_output": False},
            lambda s: ADAPTER.build_chat_payload(s, ChatInput.of("x"), ChatOptions(json_schema={"type": "object"}), False),
        ),
        ({}, lambda s: ADAPTER.build_image_payload(s, "a cat", GenerateImageOptions.DEFAULT)),
    ],
)
def test_missing_capabilities_fail_before_any_upload(overrides, build):
    uploads: List[Attachment] = []
    with pytest.raises(CapabilityUnsupportedError) as ei:
        build(_service(uploads=uploads, **overrides))
    assert "OpenAI (gpt-5-mini)" in ei.value.message  # nosec B101
    assert uploads == []  # nosec B101


def test_file_upload_unsupported(pdf_bytes):
    chat_input = ChatInput.builder().message("x").attach(pdf_bytes).build()
    with pytest.raises(CapabilityUnsupportedError):
        ADAPTER.build_chat_payload(_service(file_upload=False), chat_input, ChatOptions(), False)


def test_legacy_model_has_no_streaming():
    with pytest.raises(CapabilityUnsupportedError):
        ADAPTER.build_chat_payload(_service("gpt-3.5-turbo"), ChatInput.of("x"), ChatOptions(), True)


def test_parse_both_response_shapes():
    responses = {
        "output": [
            {"type": "reasoning", "content": []},
            {"type": "message", "content": [{"type": "output_text", "text": "Hello"}]},
        ]
    }
    completions = {"choices": [{"message": {"role": "assistant", "content": "Hi there"}}]}
    assert ADAPTER.parse_chat_response(json.dumps(responses)) == "Hello"  # nosec B101
    assert ADAPTER.parse_chat_response(json.dumps(completions)) == "Hi there"  # nosec B101


def test_responses_stream_grammar():
    service = _service()
    events = [
        StreamEvent.event("response.created"),
        StreamEvent.data('{"type": "response.created"}'),
        StreamEvent.event("response.output_text.delta"),
        StreamEvent.data('{"type": "response.output_text.delta", "delta": "Hel"}'),
        StreamEvent.data('{"type": "response.output_text.delta", "delta": "lo"}'),
        StreamEvent.event("response.completed"),
        StreamEvent.data('{"type": "response.output_text.delta", "delta": "never"}'),
    ]
    assert _stream(service, events) == "Hello"  # nosec B101


def test_responses_stream_failures():
    service = _service()
    with pytest.raises(TokenLimitExceededError):
        _stream(service, [StreamEvent.event("response.incomplete")])
    with pytest.raises(VendorReportedError):
        _stream(service, [StreamEvent.data('{"type": "response.failed", "response": {}}')])


def test_chat_completions_stream_grammar():
    service = _service(responses_api=False)
    chunk = '{"object": "chat.completion.chunk", "choices": [{"delta": {"content": "%s"}, "finish_reason": %s}]}'
    events = [
        StreamEvent.data(chunk % ("Hi", "null")),
        StreamEvent.data("not json chat.completion.chunk"),
        StreamEvent.data(chunk % (" there", '"stop"')),
        StreamEvent.data("[DONE]"),
        StreamEvent.data(chunk % ("!", "null")),
    ]
    assert _stream(service, events) == "Hi there"  # nosec B101
    with pytest.raises(TokenLimitExceededError):
        _stream(service, [StreamEvent.data(chunk % ("cut", '"length"'))])


def test_error_events_end_both_stream_grammars():
    error_chunk = '{"object": "chat.completion.chunk", "error": {"code": 502, "message": "upstream down"}, "choices": []}'
    with pytest.raises(VendorReportedError) as ei:
        _stream(_service(responses_api=False), [StreamEvent.data(error_chunk)])
    assert ei.value.message == "Error event returned"  # nosec B101
    assert ei.value.response_body == error_chunk  # nosec B101
    with pytest.raises(VendorReportedError):
        _stream(_service(), [StreamEvent.data('{"type": "error", "code": "server_error", "message": "boom"}')])


def test_image_generation_payload_and_parse(png_bytes):
    service = _service("gpt-image-1")
    payload = ADAPTER.build_image_payload(service, "a cat", GenerateImageOptions(size="1024x1024", quality="high"))
    assert ADAPTER.image_path(service) == "images/generations"  # nosec B101
    assert payload == {  # nosec B101
        "model": "gpt-image-1",
        "prompt": "a cat",
        "n": 1,
        "size": "1024x1024",
        "quality": "high",
        "output_format": "png",
    }
    body = json.dumps({"data": [{"b64_json": base64.b64encode(png_bytes).decode()}]})
    assert ADAPTER.parse_image_response(body) == png_bytes  # nosec B101
    with pytest.raises(ValueError):
        ADAPTER.build_image_payload(service, "  ", GenerateImageOptions.DEFAULT)


def test_headers_and_upload_metadata(pdf_bytes):
    service = _service()
    attachment = Attachment(mime_type="application/pdf", file_name="a.pdf", content=pdf_bytes)
    assert ADAPTER.request_headers(service) == {"Authorization": "Bearer sk-unit"}  # nosec B101
    assert ADAPTER.file_upload_metadata(service, attachment) == {"purpose": "user_data"}  # nosec B101
    assert ADAPTER.files_path(service) == "files"  # nosec B101
