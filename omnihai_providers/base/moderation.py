"""
Moderation request building and result parsing.

Two routes produce the same :class:`~.models.ModerationResult`:

- **native**: OpenAI family services with the ``native_moderation``
  capability, asked only for categories that endpoint scores, POST
  ``{"input": text}`` to ``moderations``. Scores come from
  ``results[0].category_scores``; sub-categories such as
  ``harassment/threatening`` are kept when their prefix was requested.
- **chat**: everything else asks the chat model for structured output shaped
  ``{"scores": {<category>: number}}`` at the deterministic temperature.

Either way ``flagged`` is ``any(score > threshold)``, strictly greater.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping

from .adapter_parts.prompts import build_moderation_prompt
from .errors import MalformedResponseError
from .json_path import parse_json
from .models import (
    ChatOptions,
    DETERMINISTIC_TEMPERATURE,
    ModerationOptions,
    ModerationResult,
    OPENAI_NATIVE_CATEGORIES,
    ServiceContext,
)

MODERATIONS_PATH = "moderations"


def supports_native_moderation(service: ServiceContext, options: ModerationOptions) -> bool:
    return service.capabilities.native_moderation and options.categories <= OPENAI_NATIVE_CATEGORIES


def build_native_payload(content: str) -> Dict[str, Any]:
    return {"input": content}


def _score(value: Any, category: str, body: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedResponseError(f"Score of category '{category}' is not a number", body)
    return float(value)


def parse_native_response(body: str, options: ModerationOptions) -> ModerationResult:
    document = parse_json(body)
    results = document.get("results")
    if not isinstance(results, list) or not results:
        raise MalformedResponseError("Response is empty", body)
    category_scores = results[0].get("category_scores") if isinstance(results[0], dict) else None
    scores: Dict[str, float] = {}
    if isinstance(category_scores, Mapping):
        for category, value in category_scores.items():
            if category.split("/", 1)[0] in options.categories:
                scores[category] = _score(value, category, body)
    return ModerationResult.evaluate(scores, options.threshold)


def build_moderation_schema(options: ModerationOptions) -> Dict[str, Any]:
    categories = options.sorted_categories()
    return {
        "type": "object",
        "properties": {
            "scores": {
                "type": "object",
                "properties": {category: {"type": "number"} for category in categories},
                "required": categories,
            }
        },
        "required": ["scores"],
    }


def moderation_chat_options(options: ModerationOptions) -> ChatOptions:
    return ChatOptions(
        system_prompt=build_moderation_prompt(options.sorted_categories()),
        temperature=DETERMINISTIC_TEMPERATURE,
        json_schema=build_moderation_schema(options),
    )


def parse_moderation_chat_response(response: str, options: ModerationOptions) -> ModerationResult:
    """Interpret the structured chat reply; categories that were not requested are ignored."""
    document = parse_json(response)
    raw_scores = document.get("scores")
    if not isinstance(raw_scores, Mapping):
        raise MalformedResponseError("Response has no scores", response)
    scores = {
        category: _score(value, category, response)
        for category, value in raw_scores.items()
        if category in options.categories
    }
    return ModerationResult.evaluate(scores, options.threshold)


__all__ = [
    "MODERATIONS_PATH",
    "supports_native_moderation",
    "build_native_payload",
    "parse_native_response",
    "build_moderation_schema",
    "moderation_chat_options",
    "parse_moderation_chat_response",
]
