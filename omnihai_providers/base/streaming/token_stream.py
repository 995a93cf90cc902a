"""Pull loop feeding stream events through a per-event processor.

A processor receives one :class:`StreamEvent` plus an ``on_token`` callback
and returns ``True`` to keep consuming or ``False`` once the vendor's end
marker was reached. :func:`iter_stream_tokens` turns that contract into a
plain generator of text tokens: the caller pulls, tokens come out in order,
and the event source is closed as soon as the processor says stop or the
caller stops pulling.
"""
from __future__ import annotations

from collections import deque
from typing import Callable, Deque, Iterable, Iterator

from .stream_event import StreamEvent

TokenCallback = Callable[[str], None]
EventProcessor = Callable[[StreamEvent, TokenCallback], bool]


def iter_stream_tokens(events: Iterable[StreamEvent], processor: EventProcessor) -> Iterator[str]:
    """Yield every non-empty token ``processor`` emits while consuming ``events``.

    Errors raised by ``processor`` (vendor error events, token limit) propagate
    to the caller immediately, abandoning the stream.
    """
    pending: Deque[str] = deque()

    def on_token(token: str) -> None:
        if token:
            pending.append(token)

    iterator = iter(events)
    try:
        for event in iterator:
            keep_going = processor(event, on_token)
            while pending:
                yield pending.popleft()
            if not keep_going:
                break
    finally:
        close = getattr(iterator, "close", None)
        if callable(close):
            close()


def consume_stream(events: Iterable[StreamEvent], processor: EventProcessor, on_token: TokenCallback) -> str:
    """Push variant of :func:`iter_stream_tokens`; returns the concatenated text."""
    parts = []
    for token in iter_stream_tokens(events, processor):
        on_token(token)
        parts.append(token)
    return "".join(parts)


__all__ = ["TokenCallback", "EventProcessor", "iter_stream_tokens", "consume_stream"]
