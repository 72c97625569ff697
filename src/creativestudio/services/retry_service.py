"""Retry policy with exponential backoff for transport-level failures."""

import asyncio
import logging
from typing import Any, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from creativestudio.config import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY_SECONDS
from creativestudio.models.errors import GenerationTimeoutError, TransientNetworkError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _log_before_sleep(retry_state: RetryCallState) -> None:
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    delay = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        f"🔁 [RetryService] Network error on attempt {retry_state.attempt_number}, "
        f"retrying in {delay:.2f}s: {exception}"
    )


def build_retry_config(
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY_SECONDS,
) -> dict[str, Any]:
    """
    Build the tenacity configuration for one call.

    ``max_retries`` counts total attempts. Waits are ``retry_delay * 2**n``
    for n = 0, 1, ... between attempts. Only TransientNetworkError is retried;
    HTTP rejections, timeouts and malformed responses surface immediately.
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")
    return {
        "stop": stop_after_attempt(max_retries),
        "wait": wait_exponential(multiplier=retry_delay, exp_base=2, min=0),
        "retry": retry_if_exception_type(TransientNetworkError),
        "before_sleep": _log_before_sleep,
        "reraise": True,
    }


# Standard configuration: 3 attempts at 1s, 2s intervals
DEFAULT_RETRY_CONFIG = build_retry_config()


async def retry_with_backoff(
    func: Callable[..., T],
    *args: Any,
    retry_config: dict[str, Any] | None = None,
    timeout_seconds: float | None = None,
    **kwargs: Any,
) -> T:
    """
    Execute an async function with retry logic and exponential backoff.

    Args:
        func: Async function to execute
        *args: Positional arguments for func
        retry_config: Optional custom retry configuration. If None, uses default.
        timeout_seconds: Optional timeout per attempt. If None, no timeout is applied.
        **kwargs: Keyword arguments for func

    Returns:
        Result from func

    Raises:
        TransientNetworkError: If every attempt failed at the transport level
        GenerationTimeoutError: If an attempt exceeded timeout_seconds (not retried)
        Exception: Other exceptions are re-raised immediately
    """
    config = dict(retry_config or DEFAULT_RETRY_CONFIG)
    config.setdefault("retry", retry_if_exception_type(TransientNetworkError))

    async def _execute_with_timeout(attempt_number: int):
        """Execute func with optional timeout."""
        if timeout_seconds is None:
            return await func(*args, **kwargs)
        try:
            return await asyncio.wait_for(func(*args, **kwargs), timeout=timeout_seconds)
        except asyncio.TimeoutError as e:
            raise GenerationTimeoutError(
                f"Request timed out after {timeout_seconds}s",
                url=getattr(func, "__qualname__", None),
                payload=kwargs or None,
                attempts_made=attempt_number,
                original_exception=e,
            ) from e

    async for attempt in AsyncRetrying(**config):
        with attempt:
            return await _execute_with_timeout(attempt.retry_state.attempt_number)
