"""Correlation fields shared by every log event of one AI call.

A service binds ``provider`` and ``model`` once; each chat call then derives
its own copy through :meth:`LogContext.with_request`, so ``chat.start``, every
``stream.event`` and ``chat.end`` of that call carry the same ``request_id``
and ``operation``.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Fields merged into every event logged with this context."""

    provider: Optional[str] = None
    model: Optional[str] = None
    operation: Optional[str] = None
    request_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}

    def with_request(self, request_id: str, operation: Optional[str] = None) -> "LogContext":
        """Return a copy bound to ``request_id`` and, when given, ``operation``."""
        return replace(
            self,
            request_id=request_id,
            operation=operation or self.operation,
            extra=dict(self.extra),
        )


__all__ = ["LogContext"]
