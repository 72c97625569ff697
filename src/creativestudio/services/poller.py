"""Polling of asynchronous provider jobs until completion, failure or timeout."""

import asyncio
import logging
from typing import Awaitable, Callable

from creativestudio.config import MAX_POLL_ATTEMPTS, POLL_INTERVAL_SECONDS
from creativestudio.models.errors import (
    GenerationTimeoutError,
    MalformedResponseError,
    TransientNetworkError,
)
from creativestudio.models.responses import JobStatus, JobStatusResult
from creativestudio.models.results import AsyncJobHandle
from creativestudio.services.response_adapter import parse_webhook_status_response
from creativestudio.services.webhook_client import WebhookClient

logger = logging.getLogger(__name__)

# Poll responses that may succeed on the next attempt
TRANSIENT_POLL_ERRORS = (MalformedResponseError, TransientNetworkError)


class JobPoller:
    """
    Polls one provider's status endpoint for jobs it has already accepted.

    A job is submitted once and polled every ``interval_seconds`` for at most
    ``max_attempts`` polls. ``generating`` keeps polling; completion returns;
    a failure signal raises at once. Malformed or unreachable status responses
    are logged and retried within the same budget, and the last one is raised
    if it happens on the final attempt. Running out of attempts raises
    GenerationTimeoutError whose ``handle`` lets ``resume`` pick up from there
    without resubmitting the job.
    """

    def __init__(
        self,
        client: WebhookClient,
        status_url: str,
        output_field: str = "videos",
        interval_seconds: float = POLL_INTERVAL_SECONDS,
        max_attempts: int = MAX_POLL_ATTEMPTS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.client = client
        self.status_url = status_url
        self.output_field = output_field
        self.interval_seconds = interval_seconds
        self.max_attempts = max_attempts
        self._sleep = sleep

    async def poll(self, request_id: str) -> JobStatusResult:
        """Poll a freshly submitted job. Returns the completed status."""
        return await self._poll(request_id, start_attempt=0, ceiling=self.max_attempts)

    async def resume(self, handle: AsyncJobHandle, extra_attempts: int | None = None) -> JobStatusResult:
        """
        Continue polling a job that previously timed out.

        Attempts keep counting from ``handle.attempts_made``; the job gets
        ``extra_attempts`` (default: a full budget) more polls.
        """
        budget = extra_attempts if extra_attempts is not None else self.max_attempts
        logger.info(
            f"⏯️ [JobPoller] Resuming {handle.request_id} from attempt {handle.attempts_made} "
            f"with {budget} more polls"
        )
        return await self._poll(
            handle.request_id,
            start_attempt=handle.attempts_made,
            ceiling=handle.attempts_made + budget,
        )

    async def _poll(self, request_id: str, start_attempt: int, ceiling: int) -> JobStatusResult:
        for attempt in range(start_attempt, ceiling):
            await self._sleep(self.interval_seconds)
            is_last = attempt == ceiling - 1

            try:
                raw = await self.client.call(self.status_url, {"id": request_id})
                result = parse_webhook_status_response(raw, self.output_field)
            except TRANSIENT_POLL_ERRORS as e:
                logger.warning(
                    f"⚠️ [JobPoller] Poll {attempt + 1} for {request_id} hit a transient error"
                    f"{'' if is_last else ', retrying'}: {e}"
                )
                if is_last:
                    raise
                continue
            except GenerationTimeoutError as e:
                raise GenerationTimeoutError(
                    f"Status check for {request_id} timed out: {e.message}",
                    url=self.status_url,
                    payload={"id": request_id},
                    attempts_made=attempt + 1,
                    request_id=request_id,
                    status_url=self.status_url,
                    original_exception=e,
                ) from e

            if result.status == JobStatus.COMPLETED:
                logger.info(f"✅ [JobPoller] {request_id} completed after {attempt + 1} polls")
                return result
            logger.debug(f"⏳ [JobPoller] {request_id} still generating (poll {attempt + 1}/{ceiling})")

        total_seconds = (ceiling - start_attempt) * self.interval_seconds
        raise GenerationTimeoutError(
            f"Generation timed out after {total_seconds / 60:g} minutes.",
            url=self.status_url,
            payload={"id": request_id},
            attempts_made=ceiling,
            request_id=request_id,
            status_url=self.status_url,
        )
