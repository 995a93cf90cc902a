"""End-to-end service calls through the real HttpxTransport.

``httpx.MockTransport`` stands in for the vendor so the full path (config,
adapter, URL resolution, transport, SSE tokenizer) runs offline.
"""
from __future__ import annotations

import base64
import json
from typing import Callable, List

import httpx
import pytest

from omnihai_providers import create
from omnihai_providers.base.errors import AuthenticationError, CapabilityUnsupportedError
from omnihai_providers.base.http import HttpxTransport
from omnihai_providers.base.http import transport as transport_module
from omnihai_providers.base.models import ChatInput, ChatOptions
from omnihai_providers.base.resilience.retry import RetryConfig
from omnihai_providers.config import clear_config_cache
from omnihai_providers.config.env import reset_dotenv_state
from omnihai_providers.service import AIService

BASE_URL = "https://generativelanguage.invalid/v1beta"
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.fixture(autouse=True)
def _no_local_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "absent.env"))
    monkeypatch.delenv("PROVIDERS_CONFIG_FILE", raising=False)
    monkeypatch.delenv("GOOGLE_SYSTEM_MESSAGE", raising=False)
    reset_dotenv_state()
    clear_config_cache()


@pytest.fixture()
def vendor(monkeypatch: pytest.MonkeyPatch) -> Callable[[Callable[[httpx.Request], httpx.Response]], List[httpx.Request]]:
    """Install ``handler`` as the vendor; returns the list of received requests."""

    def _install(handler: Callable[[httpx.Request], httpx.Response]) -> List[httpx.Request]:
        seen: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        client = httpx.Client(transport=httpx.MockTransport(_record))
        monkeypatch.setattr(transport_module, "get_httpx_client", lambda base_url, purpose: client)
        return seen

    return _install


def _service(**kwargs) -> AIService:
    kwargs.setdefault("model", "gemini-2.5-flash")
    transport = HttpxTransport(retry_config=RetryConfig(sleep=lambda _: None))
    return create("google", api_key="g-key", base_url=BASE_URL, transport=transport, **kwargs)


def _candidate(text: str, finish: str = "") -> dict:
    candidate = {"content": {"parts": [{"text": text}], "role": "model"}}
    if finish:
        candidate["finishReason"] = finish
    return {"candidates": [candidate]}


def test_chat_round_trip(vendor) -> None:
    seen = vendor(lambda request: httpx.Response(200, json=_candidate("Hello there")))
    reply = _service(system_message="Answer briefly").chat("Hi", ChatOptions(max_tokens=32))
    assert reply == "Hello there"  # nosec B101
    request = seen[0]
    assert request.url.path == "/v1beta/models/gemini-2.5-flash:generateContent"  # nosec B101
    assert request.url.params["key"] == "g-key"  # nosec B101
    body = json.loads(request.read())
    assert body["system_instruction"] == {"parts": [{"text": "Answer briefly"}]}  # nosec B101
    assert body["generationConfig"]["maxOutputTokens"] == 32  # nosec B101


def test_streaming_round_trip(vendor) -> None:
    sse = "".join(
        f"data: {json.dumps(chunk)}\r\n\r\n"
        for chunk in (_candidate("Str"), _candidate("eam"), _candidate("ed", "STOP"), _candidate("ignored"))
    )
    seen = vendor(lambda request: httpx.Response(200, text=sse, headers={"content-type": "text/event-stream"}))
    tokens = list(_service().chat_stream("Tell me"))
    assert tokens == ["Str", "eam", "ed"]  # nosec B101
    assert seen[0].url.params["alt"] == "sse"  # nosec B101
    assert seen[0].headers["accept"] == "text/event-stream"  # nosec B101


def test_status_error_hides_key(vendor) -> None:
    vendor(lambda request: httpx.Response(401, text='{"error": {"message": "API key not valid"}}'))
    with pytest.raises(AuthenticationError) as ei:
        _service().chat("Hi")
    assert "g-key" not in ei.value.message  # nosec B101
    assert ei.value.status_code == 401  # nosec B101


def test_upload_then_chat_references_file_uri(vendor, tmp_path) -> None:
    doc = tmp_path / "report.pdf"
    doc.write_bytes(b"%PDF-1.7\n" + b"\x00" * 16)

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith("/upload/"):
            return httpx.Response(200, json={"file": {"uri": "https://files.invalid/abc"}})
        return httpx.Response(200, json=_candidate("A report"))

    seen = vendor(handler)
    chat_input = ChatInput.builder().message("What is this?").attach(doc).build()
    assert _service().chat(chat_input) == "A report"  # nosec B101
    upload, chat = seen
    assert upload.url.path == "/upload/v1beta/files"  # nosec B101
    assert b'filename="omnihai.file1.pdf"' in upload.read()  # nosec B101
    parts = json.loads(chat.read())["contents"][-1]["parts"]
    assert parts[0] == {"file_data": {"mime_type": "application/pdf", "file_uri": "https://files.invalid/abc"}}  # nosec B101


def test_image_generation_round_trip(vendor) -> None:
    encoded = base64.b64encode(PNG).decode()
    body = {"candidates": [{"content": {"parts": [{"text": "Here"}, {"inlineData": {"mimeType": "image/png", "data": encoded}}]}}]}
    seen = vendor(lambda request: httpx.Response(200, json=body))
    assert _service(model="gemini-2.5-flash-image").generate_image("a lighthouse") == PNG  # nosec B101
    sent = json.loads(seen[0].read())
    assert sent["generationConfig"]["responseModalities"] == ["IMAGE"]  # nosec B101


def test_capability_errors_never_reach_the_network(vendor) -> None:
    seen = vendor(lambda request: httpx.Response(500))
    with pytest.raises(CapabilityUnsupportedError):
        _service(model="gemini-1.5-pro").chat("Hi", ChatOptions(json_schema={"type": "object"}))
    assert seen == []  # nosec B101
