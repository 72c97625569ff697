"""Tests for retry service with exponential backoff."""

import asyncio
import pytest

from creativestudio.models.errors import (
    GenerationTimeoutError,
    HttpRejectionError,
    TransientNetworkError,
)
from creativestudio.services.retry_service import build_retry_config, retry_with_backoff

NO_DELAY = build_retry_config(max_retries=3, retry_delay=0)


async def failing_function(fail_count: int = 0):
    """Helper function that fails a certain number of times then succeeds."""
    if not hasattr(failing_function, "call_count"):
        failing_function.call_count = 0

    failing_function.call_count += 1
    if failing_function.call_count <= fail_count:
        raise TransientNetworkError(f"Simulated failure {failing_function.call_count}")
    return "success"


@pytest.mark.asyncio
async def test_retry_succeeds_after_failures():
    """Test that retry succeeds after transient failures."""
    failing_function.call_count = 0

    result = await retry_with_backoff(failing_function, fail_count=2, retry_config=NO_DELAY)

    assert result == "success"
    assert failing_function.call_count == 3


@pytest.mark.asyncio
async def test_retry_exhausts_after_max_attempts():
    """Test that retry raises after max attempts are exhausted."""
    failing_function.call_count = 0

    with pytest.raises(TransientNetworkError):
        await retry_with_backoff(failing_function, fail_count=999, retry_config=NO_DELAY)

    assert failing_function.call_count == 3


@pytest.mark.asyncio
async def test_retry_succeeds_on_first_attempt():
    """Test that retry doesn't retry if first attempt succeeds."""
    failing_function.call_count = 0

    result = await retry_with_backoff(failing_function, fail_count=0, retry_config=NO_DELAY)

    assert result == "success"
    assert failing_function.call_count == 1


@pytest.mark.asyncio
async def test_no_retry_on_http_rejection():
    """Test that HTTP rejections surface without retrying."""
    calls = 0

    async def rejected():
        nonlocal calls
        calls += 1
        raise HttpRejectionError("Bad request", status_code=400)

    with pytest.raises(HttpRejectionError):
        await retry_with_backoff(rejected, retry_config=NO_DELAY)

    assert calls == 1


@pytest.mark.asyncio
async def test_timeout_not_retried():
    """Test that a per-attempt timeout raises GenerationTimeoutError once."""
    calls = 0

    async def slow():
        nonlocal calls
        calls += 1
        await asyncio.sleep(1)

    with pytest.raises(GenerationTimeoutError) as exc_info:
        await retry_with_backoff(slow, retry_config=NO_DELAY, timeout_seconds=0.01)

    assert calls == 1
    assert exc_info.value.attempts_made == 1


def test_backoff_waits_double():
    """Test the 1s, 2s, 4s wait schedule."""
    config = build_retry_config(max_retries=4, retry_delay=1.0)
    wait = config["wait"]

    class State:
        def __init__(self, attempt_number):
            self.attempt_number = attempt_number

    assert [wait(State(n)) for n in (1, 2, 3)] == [1.0, 2.0, 4.0]


def test_invalid_attempt_count():
    with pytest.raises(ValueError):
        build_retry_config(max_retries=0)
