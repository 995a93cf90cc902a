"""Ollama provider package."""

from .adapter import OllamaAdapter, create_adapter, ollama_capabilities

__all__ = ["OllamaAdapter", "create_adapter", "ollama_capabilities"]
