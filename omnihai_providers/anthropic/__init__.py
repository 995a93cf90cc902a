"""Anthropic provider package."""

from .adapter import AnthropicAdapter, anthropic_capabilities, create_adapter

__all__ = ["AnthropicAdapter", "anthropic_capabilities", "create_adapter"]
