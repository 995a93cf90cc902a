"""OpenAI capability table computed from the model version."""
from __future__ import annotations

from ..base.models import AIModelVersion, ServiceCapabilities

GPT_4 = AIModelVersion("gpt", 4)
GPT_5 = AIModelVersion("gpt", 5)
DALL_E = AIModelVersion("dall-e", 2)


def openai_capabilities(model_name: str) -> ServiceCapabilities:
    """Responses API, streaming and structured output from ``gpt-4`` on."""
    version = AIModelVersion.of(model_name)
    name = model_name.lower()
    modern = version.gte(GPT_4)
    return ServiceCapabilities(
        streaming=modern,
        file_upload=True,
        structured_output=modern,
        responses_api=modern,
        native_moderation=True,
        image_generation=version.gte(DALL_E) or "image" in name,
        image_analysis=modern or "vision" in name,
    )


__all__ = ["GPT_4", "GPT_5", "DALL_E", "openai_capabilities"]
