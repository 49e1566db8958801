"""
Property-based tests for error handling.

These tests verify universal properties that should hold for all error handling
operations across randomly generated inputs.
"""

import asyncio
from unittest.mock import patch

import pytest
from hypothesis import given, settings, strategies as st

from popup_gallery.error_handling import (
    ErrorHandler,
    MalformedRecord,
    RetryConfig,
    SourceUnavailable,
)


# Strategy for generating retry configuration values
retry_counts = st.integers(min_value=1, max_value=10)
timeout_values = st.floats(min_value=0.5, max_value=60.0)
multiplier_values = st.floats(min_value=1.1, max_value=3.0)
attempt_numbers = st.integers(min_value=0, max_value=9)


@given(
    initial_timeout=timeout_values,
    multiplier=multiplier_values,
    attempt=attempt_numbers
)
@settings(max_examples=100)
def test_retry_timeout_escalation(initial_timeout, multiplier, attempt):
    """
    **Property: Retry timeout escalation**

    For any failed fetch, the retry attempt should use a timeout greater than
    the previous attempt, scaled by the multiplier.
    """
    config = RetryConfig(
        initial_timeout_seconds=initial_timeout,
        timeout_multiplier=multiplier
    )

    current_timeout = config.get_timeout(attempt)
    next_timeout = config.get_timeout(attempt + 1)

    assert current_timeout == pytest.approx(initial_timeout * (multiplier ** attempt))
    assert next_timeout > current_timeout
    assert next_timeout / current_timeout == pytest.approx(multiplier)


@given(
    initial_timeout=timeout_values,
    override=timeout_values,
    attempt=attempt_numbers
)
@settings(max_examples=50)
def test_explicit_initial_timeout_overrides_config(initial_timeout, override, attempt):
    """
    Test that a caller-supplied first timeout replaces the configured one.
    """
    config = RetryConfig(initial_timeout_seconds=initial_timeout, timeout_multiplier=1.5)

    assert config.get_timeout(attempt, override) == pytest.approx(override * (1.5 ** attempt))


@given(
    max_retries=retry_counts,
    multiplier=multiplier_values
)
@settings(max_examples=100, deadline=None)
def test_retry_exhaustion_termination(max_retries, multiplier):
    """
    **Property: Retry exhaustion termination**

    For any fetch that fails max_retries times, the handler should stop and
    raise the last failure.
    """
    handler = ErrorHandler(
        max_retries=max_retries,
        timeout_multiplier=multiplier
    )

    call_count = 0

    async def always_fails():
        nonlocal call_count
        call_count += 1
        raise SourceUnavailable("test", f"Simulated failure #{call_count}")

    # Mock asyncio.sleep to avoid delays during testing
    with patch('asyncio.sleep', return_value=None):
        with pytest.raises(SourceUnavailable) as exc_info:
            asyncio.run(handler.retry_with_backoff(always_fails))

    assert call_count == max_retries
    assert exc_info.value.reason == f"Simulated failure #{max_retries}"


@given(
    max_retries=retry_counts,
    success_on_attempt=st.integers(min_value=1, max_value=10)
)
@settings(max_examples=100, deadline=None)
def test_retry_succeeds_before_exhaustion(max_retries, success_on_attempt):
    """
    Test that retry logic returns successfully when the fetch succeeds
    before exhausting retries.
    """
    if success_on_attempt > max_retries:
        return

    handler = ErrorHandler(max_retries=max_retries)

    call_count = 0

    async def fails_then_succeeds():
        nonlocal call_count
        call_count += 1
        if call_count < success_on_attempt:
            raise SourceUnavailable("test", f"Failure #{call_count}")
        return f"Success on attempt {call_count}"

    with patch('asyncio.sleep', return_value=None):
        result = asyncio.run(handler.retry_with_backoff(fails_then_succeeds))

    assert call_count == success_on_attempt
    assert result == f"Success on attempt {success_on_attempt}"


@pytest.mark.parametrize("error", [
    ValueError("bug"),
    MalformedRecord("title: Field required", index=0),
])
def test_non_retryable_errors_propagate_immediately(error):
    handler = ErrorHandler(max_retries=5)
    call_count = 0

    async def fails():
        nonlocal call_count
        call_count += 1
        raise error

    with patch('asyncio.sleep', return_value=None) as sleep:
        with pytest.raises(type(error)):
            asyncio.run(handler.retry_with_backoff(fails))

    assert call_count == 1
    assert not sleep.called


def test_backoff_sleeps_between_attempts_only():
    handler = ErrorHandler(max_retries=3, backoff_base_seconds=1.0)

    async def always_fails():
        raise SourceUnavailable("test", "down")

    with patch('asyncio.sleep', return_value=None) as sleep:
        with pytest.raises(SourceUnavailable):
            asyncio.run(handler.retry_with_backoff(always_fails))

    assert [call.args[0] for call in sleep.call_args_list] == [1.0, 2.0]


def test_timeout_keyword_is_escalated_per_attempt():
    handler = ErrorHandler(max_retries=3, timeout_multiplier=2.0, backoff_base_seconds=0.0)
    seen = []

    async def fetch(timeout_seconds=None):
        seen.append(timeout_seconds)
        if len(seen) < 3:
            raise SourceUnavailable("test", "request timed out")
        return "ok"

    result = asyncio.run(handler.retry_with_backoff(fetch, timeout_seconds=4.0))

    assert result == "ok"
    assert seen == [4.0, 8.0, 16.0]


def test_missing_timeout_falls_back_to_configured_initial():
    handler = ErrorHandler(max_retries=1, initial_timeout_seconds=7.0)
    seen = []

    async def fetch(timeout_seconds=None):
        seen.append(timeout_seconds)
        return []

    asyncio.run(handler.retry_with_backoff(fetch, timeout_seconds=None))

    assert seen == [7.0]


def test_cancellation_is_not_retried():
    handler = ErrorHandler(max_retries=5, backoff_base_seconds=0.0)
    call_count = 0

    async def cancelled():
        nonlocal call_count
        call_count += 1
        raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(handler.retry_with_backoff(cancelled))

    assert call_count == 1


def test_max_retries_must_be_positive():
    with pytest.raises(ValueError):
        ErrorHandler(max_retries=0)


@given(attempt=attempt_numbers)
@settings(max_examples=100)
def test_backoff_delay_exponential_growth(attempt):
    """
    Test that backoff delays grow exponentially.

    delay = 2.0 * (2 ^ attempt) with the default configuration.
    """
    config = RetryConfig()

    delay = config.get_backoff_delay(attempt)

    assert delay == 2.0 * (2 ** attempt)
    assert config.get_backoff_delay(attempt + 1) == delay * 2


def test_from_config_copies_policy():
    config = RetryConfig(
        max_retries=5,
        initial_timeout_seconds=3.0,
        timeout_multiplier=2.5,
        backoff_base_seconds=0.5
    )

    handler = ErrorHandler.from_config(config)

    assert handler.config == config


@pytest.mark.parametrize("error,expected", [
    (SourceUnavailable("http", "request timed out after 10.0s"), "REQUEST_TIMEOUT_SECONDS"),
    (SourceUnavailable("http", "unexpected HTTP status 503"), "LISTINGS_URL"),
    (SourceUnavailable("file", "cannot read file listings.json"), "LISTINGS_PATH"),
    (SourceUnavailable("sample", "broken"), "Retry the load"),
    (RuntimeError("boom"), "--verbose"),
])
def test_describe_failure_suggests_recovery(error, expected):
    report = ErrorHandler().describe_failure(error)

    assert report['error_type'] == type(error).__name__
    assert report['error_message'] == str(error)
    assert any(expected in suggestion for suggestion in report['recovery_suggestions'])
