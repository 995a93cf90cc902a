"""Three-field streamed event record produced by the SSE tokenizer."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StreamEventType(str, Enum):
    ID = "id"
    EVENT = "event"
    DATA = "data"


@dataclass(frozen=True)
class StreamEvent:
    """One unit of a server-sent-events response.

    ``value`` holds the text after the field name, stripped. For ``DATA``
    events, consecutive ``data:`` lines are joined with ``\\n``.
    """

    type: StreamEventType
    value: str

    @classmethod
    def id(cls, value: str) -> "StreamEvent":
        return cls(StreamEventType.ID, value)

    @classmethod
    def event(cls, value: str) -> "StreamEvent":
        return cls(StreamEventType.EVENT, value)

    @classmethod
    def data(cls, value: str) -> "StreamEvent":
        return cls(StreamEventType.DATA, value)

    def __str__(self) -> str:
        return f"{self.type.value}: {self.value}"


__all__ = ["StreamEvent", "StreamEventType"]
