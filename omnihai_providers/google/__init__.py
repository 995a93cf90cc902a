"""Google Gemini provider package."""

from .adapter import GoogleAdapter, create_adapter, google_capabilities

__all__ = ["GoogleAdapter", "create_adapter", "google_capabilities"]
