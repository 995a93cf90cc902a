"""Protocol adapter public surface.

Re-exports the adapter protocol and the free functions shared by every vendor
adapter under ``omnihai_providers.base.adapter_parts``.
"""

from .adapter_parts.capability_checks import (
    check_chat_capabilities,
    check_supports_file_upload,
    check_supports_image_analysis,
    check_supports_image_generation,
    check_supports_streaming,
    check_supports_structured_output,
    unsupported_feature,
)
from .adapter_parts.messages import is_blank, plain_history
from .adapter_parts.protocol import ProtocolAdapter
from .adapter_parts.response_parsing import parse_chat_response, parse_file_response, parse_image_response
from .adapter_parts.stream_support import emit_token, try_parse_event_data_json

__all__ = [
    "ProtocolAdapter",
    "check_chat_capabilities",
    "check_supports_file_upload",
    "check_supports_image_analysis",
    "check_supports_image_generation",
    "check_supports_streaming",
    "check_supports_structured_output",
    "unsupported_feature",
    "is_blank",
    "plain_history",
    "parse_chat_response",
    "parse_file_response",
    "parse_image_response",
    "emit_token",
    "try_parse_event_data_json",
]
