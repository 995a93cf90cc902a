"""Streaming package for the provider layer.

Exposes the stream event record, the SSE tokenizer and the token pull loop
under a single namespace.
"""

from .stream_event import StreamEvent, StreamEventType
from .sse import iter_sse_events
from .token_stream import EventProcessor, TokenCallback, consume_stream, iter_stream_tokens

__all__ = [
    "StreamEvent",
    "StreamEventType",
    "iter_sse_events",
    "EventProcessor",
    "TokenCallback",
    "iter_stream_tokens",
    "consume_stream",
]
