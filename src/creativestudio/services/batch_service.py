"""Batch controller: runs a studio's tasks and keeps its result slots current."""

import logging
import time
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from creativestudio.config import concurrency_for
from creativestudio.interfaces import IGenerator
from creativestudio.models.errors import TaskFailedError
from creativestudio.models.metrics import BatchMetrics
from creativestudio.models.requests import GenerationTask
from creativestudio.models.responses import TaskOutcome
from creativestudio.models.results import BatchSummary, ProgressCounter, ResultKey
from creativestudio.services.metrics_service import MetricsService
from creativestudio.services.response_adapter import describe_error
from creativestudio.services.result_store import ResultStore
from creativestudio.services.task_runner import ProgressCallback, run_concurrent_tasks
from creativestudio.utils.logging_utils import log_user_action

logger = logging.getLogger(__name__)


def task_context(task: GenerationTask) -> str:
    """Short label naming a task in error messages."""
    return ", ".join(value for value in task.labels.values() if value) or task.filename


class GenerationBatch:
    """
    Caller contract of one studio: pending slots, runner dispatch and retries.

    Results are matched back to their slots by identity key, so completion
    order does not matter. Retries reuse the original keys and overwrite in
    place.
    """

    def __init__(
        self,
        generation_service: IGenerator,
        studio: str,
        concurrency: int | None = None,
        store: ResultStore | None = None,
        metrics_service: MetricsService | None = None,
        user_id: str | None = None,
    ):
        """
        Initialize a batch controller.

        Args:
            generation_service: Service that runs individual tasks
            studio: Studio name, used for concurrency defaults, logs and metrics
            concurrency: Worker count (defaults to the studio's tuned value)
            store: Result slots (a fresh store when omitted)
            metrics_service: Optional MetricsService for recording batch metrics
            user_id: User the batch runs for, attached to user action logs
        """
        self.generation_service = generation_service
        self.studio = studio
        self.concurrency = concurrency or concurrency_for(studio)
        self.store = store or ResultStore()
        self._metrics_service = metrics_service
        self.user_id = user_id
        self.progress = ProgressCounter()
        self._active_dispatches = 0
        self._tasks: dict[ResultKey, GenerationTask] = {}

    def add(self, tasks: Iterable[GenerationTask]) -> list[GenerationTask]:
        """Register tasks and create their pending slots."""
        added = []
        for task in tasks:
            self.store.add_pending(task)
            self._tasks[task.key] = task
            added.append(task)
        return added

    def _on_success(self, outcome: TaskOutcome) -> None:
        if self.store.apply_success(outcome.task, outcome.url) is not None:
            logger.info(f"✅ [{self.studio}] {outcome.task.filename} generated")

    def _on_failure(self, error: BaseException) -> None:
        if not isinstance(error, TaskFailedError):
            logger.error(f"❌ [{self.studio}] Unattributable task failure: {error}")
            return
        message = describe_error(error.error, task_context(error.task))
        self.store.apply_failure(error.task, error.error, message)

    async def _dispatch(
        self,
        tasks: Sequence[GenerationTask],
        on_progress: Optional[ProgressCallback] = None,
    ) -> BatchSummary:
        if self._active_dispatches:
            # Retries started mid-batch join the running counter.
            progress = self.progress.extend(len(tasks))
        else:
            progress = self.progress = ProgressCounter(total=len(tasks))
        self._active_dispatches += 1

        def _progress(completed: int, total: int) -> None:
            progress.advance()
            if on_progress:
                on_progress(completed, total)

        start_time = time.time()
        try:
            failed = await run_concurrent_tasks(
                [self.generation_service.make_job(task) for task in tasks],
                self.concurrency,
                on_success=self._on_success,
                on_failure=self._on_failure,
                on_progress=_progress,
            )
        finally:
            self._active_dispatches -= 1
        duration_ms = int((time.time() - start_time) * 1000)

        summary = self.store.summary(task.key for task in tasks)
        if self._metrics_service is not None:
            self._metrics_service.record(
                BatchMetrics(
                    studio=self.studio,
                    duration_ms=duration_ms,
                    total=len(tasks),
                    failed=failed,
                    model_used=tasks[0].model if tasks else None,
                    concurrency=self.concurrency,
                    timestamp=datetime.now(timezone.utc),
                )
            )
        log_user_action(
            "generation_batch_completed",
            user_id=self.user_id,
            studio=self.studio,
            total=summary.total,
            succeeded=summary.succeeded,
            failed=summary.failed,
            duration_ms=duration_ms,
        )
        return summary

    async def run(
        self,
        tasks: Sequence[GenerationTask],
        on_progress: Optional[ProgressCallback] = None,
    ) -> BatchSummary:
        """
        Add ``tasks`` as pending slots and generate them all.

        Returns:
            Summary over this batch's slots; ``failed`` counts errors and warnings
        """
        tasks = self.add(tasks)
        logger.info(f"🚀 [{self.studio}] Generating {len(tasks)} tasks with {self.concurrency} workers")
        log_user_action("generation_batch_started", user_id=self.user_id, studio=self.studio, total=len(tasks))
        return await self._dispatch(tasks, on_progress)

    async def retry_one(self, key: ResultKey) -> BatchSummary:
        """Resubmit one slot as a fresh task bound to the same key."""
        task = self._tasks.get(key)
        if task is None or key not in self.store:
            raise KeyError(f"No result slot for {key}")
        task = task.model_copy(deep=True)
        self.store.mark_pending(task)
        logger.info(f"🔄 [{self.studio}] Retrying {task.filename}")
        return await self._dispatch([task])

    async def retry_failed(self, on_progress: Optional[ProgressCallback] = None) -> BatchSummary:
        """Resubmit only the error and warning slots, keeping their keys."""
        tasks = [self._tasks[key].model_copy(deep=True) for key in self.store.failed_keys() if key in self._tasks]
        if not tasks:
            return BatchSummary()
        for task in tasks:
            self.store.mark_pending(task)
        logger.info(f"🔄 [{self.studio}] Retrying {len(tasks)} failed tasks")
        return await self._dispatch(tasks, on_progress)

    def remove(self, key: ResultKey) -> bool:
        """Drop a slot. An in-flight call still finishes but its result is discarded."""
        self._tasks.pop(key, None)
        return self.store.remove(key)
