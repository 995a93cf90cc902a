"""OpenAI streaming helpers.

Two event grammars exist: the Responses API names every event
(``event: response.output_text.delta`` followed by its JSON data) and ends with
``response.completed``; chat completions sends anonymous ``chat.completion.chunk``
data events and ends with a ``[DONE]`` sentinel.
"""
from __future__ import annotations

from typing import Any, Dict

from ..base.adapters import emit_token, try_parse_event_data_json
from ..base.errors import TokenLimitExceededError, VendorReportedError
from ..base.json_path import find_all_by_path, find_by_path
from ..base.streaming import StreamEvent, StreamEventType, TokenCallback

_DONE_SENTINELS = ("done", "[done]")


def process_responses_event(event: StreamEvent, on_token: TokenCallback) -> bool:
    if event.type is StreamEventType.EVENT:
        if event.value == "response.completed":
            return False
        if event.value == "response.incomplete":
            raise TokenLimitExceededError()
        return True
    if event.type is not StreamEventType.DATA:
        return True
    # cheap pre-filter, most Responses API events carry nothing we need
    if not any(kind in event.value for kind in ("response.output_text.delta", "response.failed", '"error"')):
        return True

    def _handle(document: Dict[str, Any]) -> bool:
        event_type = document.get("type")
        if event_type == "response.output_text.delta":
            emit_token(document.get("delta"), on_token)
        elif event_type in ("response.failed", "error"):
            raise VendorReportedError("Error event returned", event.value)
        return True

    return try_parse_event_data_json(event.value, _handle)


def process_chat_completions_event(event: StreamEvent, on_token: TokenCallback) -> bool:
    if event.type is not StreamEventType.DATA:
        return True
    if event.value.strip().lower() in _DONE_SENTINELS:
        return False
    if "chat.completion.chunk" not in event.value and "error" not in event.value:
        return True

    def _handle(document: Dict[str, Any]) -> bool:
        # OpenAI compatible vendors report mid-stream failures as a chunk
        # carrying an ``error`` object
        if document.get("error"):
            raise VendorReportedError("Error event returned", event.value)
        if document.get("object") != "chat.completion.chunk":
            return True
        emit_token(find_by_path(document, "choices[0].delta.content"), on_token)
        if "length" in find_all_by_path(document, "choices[*].finish_reason"):
            raise TokenLimitExceededError()
        return True

    return try_parse_event_data_json(event.value, _handle)


__all__ = ["process_responses_event", "process_chat_completions_event"]
