"""Keyed result slots for one studio session."""

import logging
from typing import Iterable, Optional

from creativestudio.models.errors import SafetyFilterWarning
from creativestudio.models.requests import GenerationTask
from creativestudio.models.results import BatchSummary, GenerationResult, ResultKey, ResultStatus

logger = logging.getLogger(__name__)


class ResultStore:
    """
    Ordered result slots, one per identity key.

    Every update replaces a single slot by key, so results may arrive in any
    order. Updates for keys that were removed (or never added) are dropped,
    and a failure never overwrites a slot that already succeeded.
    """

    def __init__(self):
        self._results: dict[ResultKey, GenerationResult] = {}

    def __len__(self) -> int:
        return len(self._results)

    def __contains__(self, key: ResultKey) -> bool:
        return key in self._results

    def add_pending(self, task: GenerationTask) -> GenerationResult:
        if task.key is None:
            raise ValueError(f"Task {task.filename} has no identity key")
        result = GenerationResult(
            key=task.key,
            prompt=task.prompt,
            filename=task.filename,
            labels=task.labels,
        )
        self._results[task.key] = result
        return result

    def mark_pending(self, task: GenerationTask) -> Optional[GenerationResult]:
        """Reset an existing slot for a retry. List position is unchanged."""
        if task.key not in self._results:
            return None
        return self.add_pending(task)

    def apply_success(self, task: GenerationTask, url: str) -> Optional[GenerationResult]:
        if task.key not in self._results:
            logger.debug(f"🗑️ [ResultStore] Dropping result for removed slot {task.key}")
            return None
        result = GenerationResult(
            key=task.key,
            status=ResultStatus.SUCCESS,
            url=url,
            prompt=task.prompt,
            filename=task.filename,
            labels=task.labels,
        )
        self._results[task.key] = result
        return result

    def apply_failure(self, task: GenerationTask, error: BaseException, message: str) -> Optional[GenerationResult]:
        """
        Record a failed slot as error, or as warning when the model declined.

        Returns None when the slot was removed or already holds a success.
        """
        current = self._results.get(task.key)
        if current is None:
            logger.debug(f"🗑️ [ResultStore] Dropping failure for removed slot {task.key}")
            return None
        if current.status == ResultStatus.SUCCESS:
            return None

        model_text = error.model_text if isinstance(error, SafetyFilterWarning) else None
        result = GenerationResult(
            key=task.key,
            status=ResultStatus.WARNING if model_text is not None else ResultStatus.ERROR,
            error=message,
            model_response=model_text,
            prompt=task.prompt,
            filename=task.filename,
            labels=task.labels,
        )
        self._results[task.key] = result
        return result

    def remove(self, key: ResultKey) -> bool:
        return self._results.pop(key, None) is not None

    def get(self, key: ResultKey) -> Optional[GenerationResult]:
        return self._results.get(key)

    def results(self) -> list[GenerationResult]:
        return list(self._results.values())

    def failed_keys(self) -> list[ResultKey]:
        return [key for key, result in self._results.items() if result.is_retryable_slot]

    def successes(self) -> list[GenerationResult]:
        return [result for result in self._results.values() if result.status == ResultStatus.SUCCESS]

    def summary(self, keys: Iterable[ResultKey] | None = None) -> BatchSummary:
        """Counts over ``keys`` (all slots by default)."""
        selected = [self._results[key] for key in keys if key in self._results] if keys is not None else self.results()
        warnings = sum(1 for result in selected if result.status == ResultStatus.WARNING)
        errors = sum(1 for result in selected if result.status == ResultStatus.ERROR)
        return BatchSummary(
            total=len(selected),
            succeeded=sum(1 for result in selected if result.status == ResultStatus.SUCCESS),
            failed=errors + warnings,
            warnings=warnings,
        )

    def clear(self) -> None:
        self._results.clear()
