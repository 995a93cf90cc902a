"""Meta Llama API: OpenAI chat completions surface with its own response envelope.

Responses carry the text under ``completion_message`` instead of ``message``;
depending on the API version the content is a plain string or a
``{"type": "text", "text": ...}`` object.
"""
from __future__ import annotations

from ..base.models import ServiceCapabilities
from ..openai.adapter import OpenAIAdapter, openai_compatible

CONTENT_PATHS = (
    "choices[0].completion_message.content.text",
    "choices[0].completion_message.content",
)


def meta_capabilities(model_name: str) -> ServiceCapabilities:
    return ServiceCapabilities(structured_output=True, image_analysis=True)


def create_adapter() -> OpenAIAdapter:
    return openai_compatible("meta", meta_capabilities, content_paths=CONTENT_PATHS)


__all__ = ["create_adapter", "meta_capabilities"]
