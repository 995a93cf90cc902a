"""OpenRouter: OpenAI chat completions surface with inline PDF attachments.

OpenRouter has no files API; documents travel as data URIs inside ``file``
content parts, and only PDF is accepted.
"""
from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ..base.errors import CapabilityUnsupportedError
from ..base.models import Attachment, ServiceCapabilities, ServiceContext
from ..openai.adapter import OpenAIAdapter, openai_compatible

CONTENT_PATHS = ("choices[0].message.content",)
PDF_MIME_TYPE = "application/pdf"


def openrouter_capabilities(model_name: str) -> ServiceCapabilities:
    return ServiceCapabilities(
        streaming=True,
        file_upload=True,
        structured_output=True,
        image_generation="image" in model_name.lower(),
        image_analysis=True,
    )


def inline_pdf_parts(service: ServiceContext, files: Sequence[Attachment], responses_api: bool) -> List[Dict[str, Any]]:
    parts = []
    for file in files:
        if file.mime_type != PDF_MIME_TYPE:
            raise CapabilityUnsupportedError(
                f"Only PDF is supported in file upload by {service.name}",
                provider=service.provider,
                model=service.model_name,
            )
        parts.append({"type": "file", "file": {"filename": file.file_name, "file_data": file.to_data_uri()}})
    return parts


def create_adapter() -> OpenAIAdapter:
    return openai_compatible(
        "openrouter",
        openrouter_capabilities,
        content_paths=CONTENT_PATHS,
        file_parts=inline_pdf_parts,
    )


__all__ = ["create_adapter", "inline_pdf_parts", "openrouter_capabilities"]
