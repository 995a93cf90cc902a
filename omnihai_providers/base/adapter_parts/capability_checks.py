"""Fail-fast capability checks shared by all adapters."""
from __future__ import annotations

from ..errors import CapabilityUnsupportedError
from ..models import ChatInput, ChatOptions, ServiceContext


def unsupported_feature(feature: str, service: ServiceContext) -> CapabilityUnsupportedError:
    return CapabilityUnsupportedError(
        f"{feature} is not supported by {service.name}",
        provider=service.provider,
        model=service.model_name,
    )


def check_supports_streaming(service: ServiceContext) -> None:
    if not service.capabilities.streaming:
        raise unsupported_feature("Streaming", service)


def check_supports_file_upload(service: ServiceContext) -> None:
    if not service.capabilities.file_upload:
        raise unsupported_feature("File upload", service)


def check_supports_structured_output(service: ServiceContext) -> None:
    if not service.capabilities.structured_output:
        raise unsupported_feature("Structured output", service)


def check_supports_image_generation(service: ServiceContext) -> None:
    if not service.capabilities.image_generation:
        raise unsupported_feature("Image generation", service)


def check_supports_image_analysis(service: ServiceContext) -> None:
    if not service.capabilities.image_analysis:
        raise unsupported_feature("Image analysis", service)


def check_chat_capabilities(
    service: ServiceContext,
    chat_input: ChatInput,
    options: ChatOptions,
    streaming: bool,
) -> None:
    """Check every feature a chat request needs.

    Runs before any payload part is built: building parts may upload files.
    """
    if streaming:
        check_supports_streaming(service)
    if options.json_schema is not None:
        check_supports_structured_output(service)
    if chat_input.images:
        check_supports_image_analysis(service)
    if chat_input.files:
        check_supports_file_upload(service)


__all__ = [
    "unsupported_feature",
    "check_chat_capabilities",
    "check_supports_streaming",
    "check_supports_file_upload",
    "check_supports_structured_output",
    "check_supports_image_generation",
    "check_supports_image_analysis",
]
