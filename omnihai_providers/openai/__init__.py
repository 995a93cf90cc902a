"""
OpenAI provider package.

Exports:
- OpenAIAdapter: protocol adapter for the Responses and chat completions APIs
- create_adapter: factory entry point used by ``AdapterFactory``
"""

from .adapter import OpenAIAdapter, create_adapter, openai_compatible
from .capabilities import openai_capabilities

__all__ = ["OpenAIAdapter", "create_adapter", "openai_compatible", "openai_capabilities"]
