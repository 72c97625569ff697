"""Metrics service for tracking batch metrics across studios."""

import logging
from typing import Any

from creativestudio.models.metrics import BatchMetrics

logger = logging.getLogger(__name__)


class MetricsService:
    """In-process aggregation of batch metrics."""

    def __init__(self):
        self._metrics: list[BatchMetrics] = []

    def record(self, metrics: BatchMetrics) -> None:
        """
        Record a batch metrics object.

        Args:
            metrics: The metrics to record
        """
        self._metrics.append(metrics)
        logger.debug(
            f"📊 [MetricsService] Recorded {metrics.studio} batch: "
            f"duration={metrics.duration_ms}ms, failed={metrics.failed}/{metrics.total}"
        )

    def get_all(self) -> list[BatchMetrics]:
        """Get all recorded metrics."""
        return self._metrics.copy()

    def clear(self) -> None:
        """Clear all recorded metrics."""
        self._metrics.clear()

    def summary(self, studio: str | None = None) -> dict[str, Any]:
        """Get a summary of recorded metrics, optionally for one studio."""
        metrics = [m for m in self._metrics if studio is None or m.studio == studio]
        if not metrics:
            return {
                "count": 0,
                "total_tasks": 0,
                "total_failed": 0,
                "failure_rate": 0.0,
                "avg_duration_ms": 0,
            }

        total_tasks = sum(m.total for m in metrics)
        total_failed = sum(m.failed for m in metrics)

        return {
            "count": len(metrics),
            "total_tasks": total_tasks,
            "total_failed": total_failed,
            "failure_rate": total_failed / total_tasks if total_tasks else 0.0,
            "avg_duration_ms": sum(m.duration_ms for m in metrics) / len(metrics),
        }
