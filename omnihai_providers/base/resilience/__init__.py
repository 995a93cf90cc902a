"""Resilience helpers (retry policy) for the transport layer."""

from .retry import DEFAULT_RETRY_CONFIG, RetryConfig, retry

__all__ = ["DEFAULT_RETRY_CONFIG", "RetryConfig", "retry"]
