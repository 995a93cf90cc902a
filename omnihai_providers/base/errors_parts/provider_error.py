"""The exception type shared by every layer of the package.

Adapters, the transport and the service façade all raise ``ProviderError``
(or a subclass) with a normalized :class:`ErrorCode`, so callers branch on
``code`` rather than on vendor specifics.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Normalized failure.

    ``retryable`` is a hint read by the transport's retry policy; ``raw``
    keeps the underlying exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str = ""
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[Exception] = None

    def __str__(self) -> str:
        return f"{self.provider or '-'}:{self.model or '-'} {self.code.value}: {self.message}"


__all__ = ["ProviderError"]
