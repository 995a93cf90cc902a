"""Exponential-backoff retry for transport calls.

Only :class:`ProviderError` failures take part: anything else propagates on
the first attempt. The transport wraps connection-level ``httpx`` errors in
``TransportFailureError`` so they qualify.
"""
from __future__ import annotations

import functools
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Tuple, TypeVar

from ..errors import ErrorCode, ProviderError

T = TypeVar("T")


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: Optional[float],
        error: Optional[ProviderError],
    ) -> None: ...


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy.

    An error is retried when it is flagged ``retryable`` and its code is in
    ``retryable_codes``. Retry ``n`` (0-based) waits
    ``initial_delay * delay_base ** n`` seconds.
    """

    max_attempts: int = 3
    initial_delay: float = 1.0
    delay_base: float = 2.0
    retryable_codes: Tuple[ErrorCode, ...] = (ErrorCode.TRANSIENT,)
    attempt_logger: Optional[AttemptLogger] = None
    sleep: Callable[[float], None] = time.sleep

    def delays(self) -> List[float]:
        return [self.initial_delay * self.delay_base**n for n in range(max(self.max_attempts - 1, 0))]

    def should_retry(self, error: ProviderError) -> bool:
        return error.retryable and error.code in self.retryable_codes


DEFAULT_RETRY_CONFIG = RetryConfig()


def retry(config: RetryConfig = DEFAULT_RETRY_CONFIG):
    """Decorate ``func`` with the policy in ``config``; the last error is re-raised."""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            delays = config.delays()
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except ProviderError as e:
                    delay = delays[attempt] if attempt < len(delays) else None
                    if config.attempt_logger is not None:
                        config.attempt_logger(
                            attempt=attempt, max_attempts=config.max_attempts, delay=delay, error=e
                        )
                    if delay is None or not config.should_retry(e):
                        raise
                    config.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator


__all__ = [
    "AttemptLogger",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "retry",
]
