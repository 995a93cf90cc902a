"""Server-sent-events tokenizer.

Turns an iterable of raw text lines into :class:`StreamEvent` values, one at a
time and without buffering the stream:

- a blank line flushes the accumulated data buffer as one ``DATA`` event;
- lines starting with ``:`` are comments (heartbeats) and are skipped;
- ``id:`` and ``event:`` lines flush pending data first, then yield their own
  event;
- consecutive ``data:`` lines accumulate, joined with ``\\n``;
- any other line is logged at DEBUG and skipped;
- data still pending at end of input is flushed.

The consumer stops the stream by no longer pulling (closing the generator),
which also closes ``lines`` when it supports ``close()``.
"""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional

from ..logging import LogContext, get_logger, log_event, normalized_log_event
from .stream_event import StreamEvent, StreamEventType

_logger = get_logger("providers.sse")

_FIELDS = (
    ("id:", StreamEventType.ID),
    ("event:", StreamEventType.EVENT),
    ("data:", StreamEventType.DATA),
)


def _parse_line(line: str) -> Optional[StreamEvent]:
    for prefix, event_type in _FIELDS:
        if line.startswith(prefix):
            return StreamEvent(event_type, line[len(prefix):].strip())
    return None


def _logged(event: StreamEvent, ctx: Optional[LogContext]) -> StreamEvent:
    normalized_log_event(
        _logger,
        "stream.event",
        ctx,
        phase="mid_stream",
        level=logging.DEBUG,
        event_type=event.type.value,
        data=event.value,
    )
    return event


def _flush(buffer: List[str], ctx: Optional[LogContext]) -> Iterator[StreamEvent]:
    if buffer:
        event = StreamEvent.data("\n".join(buffer))
        buffer.clear()
        yield _logged(event, ctx)


def iter_sse_events(lines: Iterable[str], ctx: Optional[LogContext] = None) -> Iterator[StreamEvent]:
    """Yield the events encoded in ``lines`` (see module docstring for the grammar)."""
    buffer: List[str] = []
    try:
        for raw in lines:
            if not raw.strip():
                yield from _flush(buffer, ctx)
                continue
            line = raw.strip()
            if line.startswith(":"):
                continue
            event = _parse_line(line)
            if event is None:
                log_event(_logger, "sse.unknown_line", ctx, level=logging.DEBUG, line=line)
                continue
            if event.type is StreamEventType.DATA:
                buffer.append(event.value)
                continue
            yield from _flush(buffer, ctx)
            yield _logged(event, ctx)
        yield from _flush(buffer, ctx)
    finally:
        close = getattr(lines, "close", None)
        if callable(close):
            close()


__all__ = ["iter_sse_events"]
