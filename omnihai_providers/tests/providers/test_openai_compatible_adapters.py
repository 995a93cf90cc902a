"""OpenRouter, Meta and Mistral reuse the OpenAI adapter with vendor tweaks."""
from __future__ import annotations

import json

import pytest

from omnihai_providers.base.errors import CapabilityUnsupportedError, VendorReportedError
from omnihai_providers.base.models import Attachment, ChatInput, ChatOptions, ServiceContext
from omnihai_providers.base.streaming import StreamEvent, consume_stream
from omnihai_providers.meta.adapter import create_adapter as create_meta
from omnihai_providers.mistral.adapter import create_adapter as create_mistral
from omnihai_providers.openrouter.adapter import create_adapter as create_openrouter


def _service(adapter, model: str, uploads=None) -> ServiceContext:
    def upload(attachment: Attachment) -> str:
        if uploads is None:
            raise AssertionError("unexpected upload")
        uploads.append(attachment)
        return "file-7"

    return ServiceContext(adapter.provider, adapter.provider.title(), model, adapter.capabilities(model), upload=upload)


def test_openrouter_inlines_pdf_without_upload(pdf_bytes):
    adapter = create_openrouter()
    service = _service(adapter, "deepseek/deepseek-v3.2")
    chat_input = ChatInput.builder().message("Read").attach(pdf_bytes).build()
    payload = adapter.build_chat_payload(service, chat_input, ChatOptions(), True)
    assert adapter.chat_path(service, True) == "chat/completions"  # nosec B101
    part = payload["messages"][-1]["content"][0]
    assert part["type"] == "file"  # nosec B101
    assert part["file"]["filename"] == "file1.pdf"  # nosec B101
    assert part["file"]["file_data"].startswith("data:application/pdf;base64,")  # nosec B101
    assert payload["stream"] is True  # nosec B101


def test_openrouter_mid_stream_error_chunk_raises():
    adapter = create_openrouter()
    service = _service(adapter, "deepseek/deepseek-v3.2")
    events = [
        StreamEvent.data(json.dumps({"object": "chat.completion.chunk", "choices": [{"delta": {"content": "Par"}}]})),
        StreamEvent.data(
            json.dumps(
                {
                    "object": "chat.completion.chunk",
                    "error": {"code": 502, "message": "Provider returned error"},
                    "choices": [{"delta": {"content": ""}, "finish_reason": "error"}],
                }
            )
        ),
    ]
    tokens = []
    with pytest.raises(VendorReportedError):
        consume_stream(events, lambda e, cb: adapter.process_chat_stream_event(service, e, cb), tokens.append)
    assert tokens == ["Par"]  # nosec B101


def test_openrouter_rejects_non_pdf_files(tmp_path):
    adapter = create_openrouter()
    doc = tmp_path / "notes.txt"
    doc.write_text("plain", encoding="utf-8")
    chat_input = ChatInput.builder().message("Read").attach(doc).build()
    with pytest.raises(CapabilityUnsupportedError) as ei:
        adapter.build_chat_payload(_service(adapter, "deepseek/deepseek-v3.2"), chat_input, ChatOptions(), False)
    assert "Only PDF" in ei.value.message  # nosec B101


def test_openrouter_parses_chat_completions_only():
    adapter = create_openrouter()
    assert adapter.chat_response_content_paths() == ("choices[0].message.content",)  # nosec B101
    assert adapter.capabilities("google/gemini-2.5-flash-image").image_generation  # nosec B101


def test_meta_response_envelope_variants():
    adapter = create_meta()
    nested = {"choices": [{"completion_message": {"content": {"type": "text", "text": "Hi"}}}]}
    flat = {"choices": [{"completion_message": {"content": "Hey"}}]}
    assert adapter.parse_chat_response(json.dumps(nested)) == "Hi"  # nosec B101
    assert adapter.parse_chat_response(json.dumps(flat)) == "Hey"  # nosec B101


def test_meta_has_no_streaming_or_uploads(pdf_bytes):
    adapter = create_meta()
    service = _service(adapter, "Llama-4-Scout-17B-16E-Instruct-FP8")
    with pytest.raises(CapabilityUnsupportedError):
        adapter.build_chat_payload(service, ChatInput.of("x"), ChatOptions(), True)
    with pytest.raises(CapabilityUnsupportedError):
        adapter.build_chat_payload(service, ChatInput.builder().message("x").attach(pdf_bytes).build(), ChatOptions(), False)


def test_meta_payload_is_chat_completions():
    adapter = create_meta()
    service = _service(adapter, "Llama-4-Scout-17B-16E-Instruct-FP8")
    payload = adapter.build_chat_payload(service, ChatInput.of("x"), ChatOptions(max_tokens=9), False)
    assert "messages" in payload and "input" not in payload  # nosec B101
    assert payload["max_tokens"] == 9  # nosec B101
    assert payload["temperature"] == 0.7  # nosec B101


def test_mistral_uploads_for_ocr(pdf_bytes):
    adapter = create_mistral()
    uploads = []
    service = _service(adapter, "mistral-medium-2508", uploads)
    attachment = Attachment(mime_type="application/pdf", file_name="a.pdf", content=pdf_bytes)
    chat_input = ChatInput.builder().message("Read").attach(pdf_bytes).build()
    payload = adapter.build_chat_payload(service, chat_input, ChatOptions(), False)
    assert payload["messages"][-1]["content"][0] == {"type": "file", "file": {"file_id": "file-7"}}  # nosec B101
    assert len(uploads) == 1  # nosec B101
    assert adapter.file_upload_metadata(service, attachment) == {"purpose": "ocr"}  # nosec B101


@pytest.mark.parametrize("model, streaming", [("mistral-medium-2508", True), ("mistral-small-latest", False)])
def test_mistral_streaming_by_release(model, streaming):
    assert create_mistral().capabilities(model).streaming is streaming  # nosec B101
