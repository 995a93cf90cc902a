from __future__ import annotations

import json

import pytest

from omnihai_providers.base.errors import MalformedResponseError
from omnihai_providers.base.models import (
    ModerationCategory,
    ModerationOptions,
    ServiceCapabilities,
    ServiceContext,
)
from omnihai_providers.base.moderation import (
    build_moderation_schema,
    build_native_payload,
    moderation_chat_options,
    parse_moderation_chat_response,
    parse_native_response,
    supports_native_moderation,
)

NATIVE_BODY = json.dumps(
    {
        "results": [
            {
                "flagged": False,
                "category_scores": {
                    "hate": 0.01,
                    "harassment": 0.2,
                    "harassment/threatening": 0.61,
                    "violence": 0.3,
                },
            }
        ]
    }
)


def _service(native: bool) -> ServiceContext:
    return ServiceContext("openai", "OpenAI", "gpt-5-mini", ServiceCapabilities(native_moderation=native))


def test_native_route_only_for_native_categories():
    assert supports_native_moderation(_service(True), ModerationOptions.DEFAULT)  # nosec B101
    assert not supports_native_moderation(_service(False), ModerationOptions.DEFAULT)  # nosec B101
    with_pii = ModerationOptions.DEFAULT.add_categories(ModerationCategory.PII)
    assert not supports_native_moderation(_service(True), with_pii)  # nosec B101
    assert build_native_payload("text") == {"input": "text"}  # nosec B101


def test_native_response_keeps_requested_prefixes():
    options = ModerationOptions(categories=["harassment", "hate"], threshold=0.5)
    result = parse_native_response(NATIVE_BODY, options)
    assert set(result.scores) == {"hate", "harassment", "harassment/threatening"}  # nosec B101
    assert result.flagged is True  # nosec B101
    assert result.highest_category() == "harassment/threatening"  # nosec B101


def test_native_response_without_results_is_malformed():
    with pytest.raises(MalformedResponseError):
        parse_native_response('{"results": []}', ModerationOptions.DEFAULT)


def test_chat_options_request_deterministic_structured_scores():
    options = ModerationOptions(categories=["spam", "hate"])
    chat_options = moderation_chat_options(options)
    assert chat_options.temperature == 0.0  # nosec B101
    assert chat_options.json_schema == build_moderation_schema(options)  # nosec B101
    assert chat_options.json_schema["properties"]["scores"]["required"] == ["hate", "spam"]  # nosec B101
    assert "hate" in chat_options.system_prompt and "spam" in chat_options.system_prompt  # nosec B101


def test_chat_response_ignores_unrequested_categories():
    options = ModerationOptions(categories=["spam"], threshold=0.5)
    result = parse_moderation_chat_response('{"scores": {"spam": 0.9, "hate": 1.0}}', options)
    assert result.scores == {"spam": 0.9}  # nosec B101
    assert result.flagged is True  # nosec B101


@pytest.mark.parametrize("body", ['{"nope": {}}', '{"scores": {"spam": "high"}}', '{"scores": {"spam": true}}'])
def test_chat_response_shape_errors(body):
    with pytest.raises(MalformedResponseError):
        parse_moderation_chat_response(body, ModerationOptions(categories=["spam"]))
