"""Service façade over the protocol adapters, plus its shared executor."""

from .ai_service import AIService, ChatMessage, ImageSource
from .executor import get_executor, shutdown_executor, submit

__all__ = ["AIService", "ChatMessage", "ImageSource", "get_executor", "shutdown_executor", "submit"]
