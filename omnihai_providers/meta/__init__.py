"""Meta provider package (OpenAI compatible surface)."""

from .adapter import create_adapter, meta_capabilities

__all__ = ["create_adapter", "meta_capabilities"]
