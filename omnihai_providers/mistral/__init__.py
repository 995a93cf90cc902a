"""Mistral provider package (OpenAI compatible surface)."""

from .adapter import create_adapter, mistral_capabilities

__all__ = ["create_adapter", "mistral_capabilities"]
