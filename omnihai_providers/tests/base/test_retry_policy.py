from __future__ import annotations

from typing import List

import pytest

from omnihai_providers.base.errors import ErrorCode, ProviderError, TransportFailureError, VendorReportedError
from omnihai_providers.base.resilience.retry import RetryConfig, retry


def _config(sleeps: List[float], **kwargs) -> RetryConfig:
    return RetryConfig(sleep=sleeps.append, **kwargs)


def test_delays_grow_exponentially():
    assert list(RetryConfig(max_attempts=4, initial_delay=0.5, delay_base=3).delays()) == [0.5, 1.5, 4.5]  # nosec B101


def test_retryable_errors_are_retried_until_success():
    sleeps: List[float] = []
    calls = {"n": 0}

    @retry(_config(sleeps))
    def flaky() -> str:
        calls["n"] += 1
        if calls["n"] < 3:
            raise TransportFailureError(calls["n"])
        return "ok"

    assert flaky() == "ok"  # nosec B101
    assert calls["n"] == 3  # nosec B101
    assert sleeps == [1.0, 2.0]  # nosec B101


def test_last_error_is_raised_when_attempts_run_out():
    sleeps: List[float] = []

    @retry(_config(sleeps, max_attempts=2))
    def always_down() -> None:
        raise TransportFailureError(0)

    with pytest.raises(TransportFailureError):
        always_down()
    assert sleeps == [1.0]  # nosec B101


@pytest.mark.parametrize(
    "error",
    [
        TransportFailureError(0, retryable=False),
        VendorReportedError("nope"),
        ProviderError(code=ErrorCode.RATE_LIMIT, message="slow down", retryable=True),
    ],
)
def test_non_retryable_errors_fail_fast(error):
    sleeps: List[float] = []
    calls = {"n": 0}

    @retry(_config(sleeps))
    def failing() -> None:
        calls["n"] += 1
        raise error

    with pytest.raises(ProviderError):
        failing()
    assert calls["n"] == 1  # nosec B101
    assert sleeps == []  # nosec B101


def test_attempt_logger_sees_every_failure():
    seen = []

    def attempt_logger(*, attempt, max_attempts, delay, error):
        seen.append((attempt, max_attempts, delay, error.code))

    @retry(RetryConfig(max_attempts=2, attempt_logger=attempt_logger, sleep=lambda _: None))
    def always_down() -> None:
        raise TransportFailureError(0)

    with pytest.raises(TransportFailureError):
        always_down()
    assert seen == [(0, 2, 1.0, ErrorCode.TRANSIENT), (1, 2, None, ErrorCode.TRANSIENT)]  # nosec B101


def test_non_provider_errors_pass_through_untouched():
    @retry(RetryConfig(sleep=lambda _: None))
    def broken() -> None:
        raise KeyError("x")

    with pytest.raises(KeyError):
        broken()
