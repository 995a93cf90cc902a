"""OpenRouter provider package (OpenAI compatible surface)."""

from .adapter import create_adapter, openrouter_capabilities

__all__ = ["create_adapter", "openrouter_capabilities"]
