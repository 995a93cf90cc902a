"""Mistral: OpenAI chat completions surface; uploads are tagged for OCR."""
from __future__ import annotations

from ..base.models import AIModelVersion, ServiceCapabilities
from ..openai.adapter import CHAT_CONTENT_PATHS, OpenAIAdapter, openai_compatible

MISTRAL_2402 = AIModelVersion("mistral", 2402)


def mistral_capabilities(model_name: str) -> ServiceCapabilities:
    return ServiceCapabilities(
        streaming=AIModelVersion.of(model_name).gte(MISTRAL_2402),
        file_upload=True,
        structured_output=True,
        image_analysis=True,
    )


def create_adapter() -> OpenAIAdapter:
    return openai_compatible(
        "mistral",
        mistral_capabilities,
        content_paths=CHAT_CONTENT_PATHS[1:],
        upload_purpose="ocr",
    )


__all__ = ["create_adapter", "mistral_capabilities", "MISTRAL_2402"]
