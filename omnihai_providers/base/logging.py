"""Structured logging for adapters, transport and the service façade.

Every logger handed out by :func:`get_logger` sits below the shared
``providers`` logger. That logger does not propagate to the root logger and
owns one stderr handler, so applications embedding the package keep control
of their own logging tree.

Events are JSON objects, one per line. :func:`normalized_log_event` adds the
keys downstream aggregation relies on (``structured``, ``phase``,
``attempt``, ``emitted``, ``tokens`` and, on failures, ``error_code``) no
matter which vendor produced the event.
"""
from __future__ import annotations

import json
import logging
import os
import sys
import threading
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Mapping, Optional, Union

from .log_support import JsonFormatter, LogContext

ROOT_LOGGER_NAME = "providers"
LEVEL_ENV = "PROVIDERS_LOG_LEVEL"
FILE_MAX_BYTES = 10 * 1024 * 1024
FILE_BACKUPS = 5

REQUIRED_NORMALIZED_KEYS = (
    "structured",
    "phase",
    "attempt",
    "error_code",
    "emitted",
    "tokens",
)

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_setup_lock = threading.Lock()
_console: Optional[logging.Handler] = None
_file: Optional[RotatingFileHandler] = None


def _level_from(value: Union[int, str, None], default: int) -> int:
    if isinstance(value, int):
        return value
    if not value:
        return default
    name = value.strip().upper()
    if name == "WARN":
        name = "WARNING"
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else default


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _stream_usable(handler: logging.Handler) -> bool:
    # pytest capture may close the stream a handler was bound to
    stream = getattr(handler, "stream", None)
    return stream is not None and not getattr(stream, "closed", False)


def _root_logger(json_mode: bool, level: int) -> logging.Logger:
    global _console
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    env_level = os.getenv(LEVEL_ENV)
    with _setup_lock:
        if env_level or _console is None:
            logger.setLevel(_level_from(env_level, level))
        if _console is not None and _console in logger.handlers and _stream_usable(_console):
            return logger
        if _console is not None:
            logger.removeHandler(_console)
        _console = logging.StreamHandler(sys.stderr)
        _console.setFormatter(_formatter(json_mode))
        logger.addHandler(_console)
        logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return ``name`` (dotted under ``providers``), initializing the shared handler once."""
    root = _root_logger(json_mode, level)
    if name == ROOT_LOGGER_NAME:
        return root
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_logger(
    *,
    level: Union[int, str, None] = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Adjust the shared ``providers`` logger at runtime.

    ``level`` accepts a number or a level name; ``None`` keeps the current
    one. ``file_path`` attaches (or retargets) one rotating file handler;
    passing ``None`` detaches it. Handlers added by the application are left
    alone.
    """
    global _file
    logger = get_logger(ROOT_LOGGER_NAME, json_mode=json_mode)
    if level is not None:
        logger.setLevel(_level_from(level, logger.level))

    target = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    with _setup_lock:
        if _file is not None and _file.baseFilename == target:
            _file.setFormatter(_formatter(json_mode))
            return logger
        if _file is not None:
            logger.removeHandler(_file)
            _file.close()
            _file = None
        if target is not None:
            os.makedirs(os.path.dirname(target), exist_ok=True)
            _file = RotatingFileHandler(target, maxBytes=FILE_MAX_BYTES, backupCount=FILE_BACKUPS, encoding="utf-8")
            _file.setFormatter(_formatter(json_mode))
            logger.addHandler(_file)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: Optional[LogContext] = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Log ``event`` and ``fields`` as one JSON object; ``None`` values are dropped unless ``keep_none``."""
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event, **(ctx.to_dict() if ctx else {})}
    payload.update(fields if keep_none else {k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: Optional[LogContext] = None,
    *,
    phase: str,
    attempt: Optional[int] = None,
    error_code: Optional[str] = None,
    emitted: Optional[bool] = None,
    tokens: Any = None,
    structured: bool = False,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Log ``event`` with the normalized keys always present.

    ``error_code`` appears only when set. Extra fields with a ``None`` value
    or a normalized key name are ignored.
    """
    if isinstance(tokens, Mapping):
        tokens = dict(tokens)
    elif tokens is not None:
        tokens = {"value": repr(tokens)}
    fields: Dict[str, Any] = {
        k: v for k, v in extra_fields.items() if v is not None and k not in REQUIRED_NORMALIZED_KEYS
    }
    fields.update(structured=structured, phase=phase, attempt=attempt, emitted=emitted, tokens=tokens)
    if error_code is not None:
        fields["error_code"] = error_code
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


__all__ = [
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
