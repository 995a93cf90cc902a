"""Helpers assembling role-tagged message lists from a :class:`ChatInput`."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..models import ChatInput, Role


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def plain_history(chat_input: ChatInput, assistant_role: str = Role.ASSISTANT.value) -> List[Dict[str, Any]]:
    """Prior turns as ``{"role", "content"}`` dicts; uploaded file references are dropped."""
    return [
        {"role": assistant_role if turn.role is Role.ASSISTANT else turn.role.value, "content": turn.content}
        for turn in chat_input.history
    ]


__all__ = ["is_blank", "plain_history"]
