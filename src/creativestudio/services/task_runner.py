"""Bounded-concurrency runner for independent generation jobs."""

import asyncio
import logging
from collections import deque
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Sequence, TypeVar

from pydantic import BaseModel, Field

from creativestudio.models.results import ProgressCounter

logger = logging.getLogger(__name__)

T = TypeVar("T")

Job = Callable[[], Awaitable[T]]
SuccessCallback = Callable[[Any], None]
FailureCallback = Callable[[BaseException], None]
ProgressCallback = Callable[[int, int], None]


async def run_concurrent_tasks(
    tasks: Sequence[Job],
    concurrency: int,
    on_success: Optional[SuccessCallback] = None,
    on_failure: Optional[FailureCallback] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> int:
    """
    Run zero-argument async jobs with at most ``concurrency`` in flight.

    ``min(concurrency, len(tasks))`` workers pop jobs off a shared queue until
    it is empty. Each job settles exactly once: ``on_success(result)`` or
    ``on_failure(error)``, then ``on_progress(completed, total)`` with
    ``completed`` growing by one per call. A failing job never stops the rest.

    Args:
        tasks: Jobs to run, in dispatch order
        concurrency: Worker count (>= 1)
        on_success: Called with each job's result
        on_failure: Called with each job's exception
        on_progress: Called after every settlement

    Returns:
        Number of failed jobs
    """
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")

    total = len(tasks)
    if total == 0:
        return 0

    queue = deque(tasks)
    completed = 0
    failed = 0

    async def worker() -> None:
        nonlocal completed, failed
        # Single event loop: popleft never interleaves with another worker's pop
        while queue:
            job = queue.popleft()
            try:
                result = await job()
            except Exception as e:
                failed += 1
                logger.error(f"❌ [TaskRunner] A generation task failed: {e}")
                if on_failure:
                    on_failure(e)
            else:
                if on_success:
                    on_success(result)
            finally:
                completed += 1
                if on_progress:
                    on_progress(completed, total)

    await asyncio.gather(*(worker() for _ in range(min(concurrency, total))))
    logger.info(f"🏁 [TaskRunner] {total} tasks settled, {failed} failed")
    return failed


class TaskEventKind(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    PROGRESS = "progress"
    DONE = "done"


class TaskEvent(BaseModel):
    """One runner event. ``payload`` is the result, the exception, a ProgressCounter or the failure count."""

    kind: TaskEventKind
    payload: Any = Field(None)


class TaskRunner:
    """Runner bound to a worker count, with callback and event-stream entry points."""

    def __init__(self, concurrency: int):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.concurrency = concurrency

    async def run(
        self,
        tasks: Sequence[Job],
        on_success: Optional[SuccessCallback] = None,
        on_failure: Optional[FailureCallback] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> int:
        return await run_concurrent_tasks(tasks, self.concurrency, on_success, on_failure, on_progress)

    async def events(self, tasks: Sequence[Job]) -> AsyncIterator[TaskEvent]:
        """
        Yield SUCCESS/FAILURE then PROGRESS for every job, in settlement order.

        The stream ends with a single DONE event carrying the failure count.
        Closing the iterator early cancels the jobs still in flight.
        """
        events: asyncio.Queue[TaskEvent] = asyncio.Queue()

        def _progress(completed: int, total: int) -> None:
            events.put_nowait(
                TaskEvent(kind=TaskEventKind.PROGRESS, payload=ProgressCounter(completed=completed, total=total))
            )

        async def _produce() -> None:
            failed = await self.run(
                tasks,
                on_success=lambda result: events.put_nowait(TaskEvent(kind=TaskEventKind.SUCCESS, payload=result)),
                on_failure=lambda error: events.put_nowait(TaskEvent(kind=TaskEventKind.FAILURE, payload=error)),
                on_progress=_progress,
            )
            events.put_nowait(TaskEvent(kind=TaskEventKind.DONE, payload=failed))

        producer = asyncio.create_task(_produce())
        try:
            while True:
                event = await events.get()
                yield event
                if event.kind == TaskEventKind.DONE:
                    break
            await producer
        finally:
            if not producer.done():
                producer.cancel()
