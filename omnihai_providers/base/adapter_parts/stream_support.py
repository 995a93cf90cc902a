"""Helpers for per-event stream processors."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from ..errors import MalformedResponseError
from ..json_path import parse_json
from ..logging import LogContext, get_logger, normalized_log_event
from ..streaming import TokenCallback

_logger = get_logger("providers.stream")


def try_parse_event_data_json(
    data: str,
    processor: Callable[[Dict[str, Any]], bool],
    ctx: Optional[LogContext] = None,
) -> bool:
    """Parse ``data`` as JSON and hand it to ``processor``.

    Unparsable data is logged at WARNING and skipped (returns ``True``) so
    heartbeat or partial lines never abort the stream. Errors raised by
    ``processor`` itself propagate.
    """
    try:
        document = parse_json(data)
    except MalformedResponseError as exc:
        normalized_log_event(
            _logger,
            "stream.decode_error",
            ctx,
            phase="mid_stream",
            error_code=exc.code.value,
            level=logging.WARNING,
            message="Skipping unparseable stream event data",
            data=data,
        )
        return True
    return processor(document)


def emit_token(token: Optional[str], on_token: TokenCallback) -> None:
    """Forward ``token`` unless it is empty; whitespace-only tokens are real tokens."""
    if token:
        on_token(token)


__all__ = ["try_parse_event_data_json", "emit_token"]
