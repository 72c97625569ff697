"""creativestudio - task orchestration and response normalization for the generation studios."""

from creativestudio.config import StudioConfig, concurrency_for
from creativestudio.interfaces import IGenerator
from creativestudio.models.errors import (
    ApiError,
    ErrorCode,
    GenerationTimeoutError,
    HttpRejectionError,
    InvalidInputError,
    MalformedResponseError,
    QuotaExceededError,
    SafetyFilterWarning,
    TaskFailedError,
    TransientNetworkError,
    is_retryable,
)
from creativestudio.models.metrics import BatchMetrics
from creativestudio.models.requests import GenerationTask, ImageBlob, ImageModel, TextModel
from creativestudio.models.responses import NormalizedApiError, TaskOutcome
from creativestudio.models.results import (
    AsyncJobHandle,
    BatchSummary,
    GenerationResult,
    ProgressCounter,
    ResultKey,
    ResultStatus,
)
from creativestudio.services.batch_service import GenerationBatch
from creativestudio.services.generation_service import GenerationService
from creativestudio.services.metrics_service import MetricsService
from creativestudio.services.poller import JobPoller
from creativestudio.services.task_runner import TaskEvent, TaskEventKind, TaskRunner, run_concurrent_tasks
from creativestudio.services.webhook_client import WebhookClient

__version__ = "0.1.0"

__all__ = [
    # Interfaces
    "IGenerator",
    # Configuration
    "StudioConfig",
    "concurrency_for",
    # Response/Error types
    "ApiError",
    "ErrorCode",
    "GenerationTimeoutError",
    "HttpRejectionError",
    "InvalidInputError",
    "MalformedResponseError",
    "NormalizedApiError",
    "QuotaExceededError",
    "SafetyFilterWarning",
    "TaskFailedError",
    "TransientNetworkError",
    "is_retryable",
    # Task and result types
    "AsyncJobHandle",
    "BatchMetrics",
    "BatchSummary",
    "GenerationResult",
    "GenerationTask",
    "ImageBlob",
    "ImageModel",
    "ProgressCounter",
    "ResultKey",
    "ResultStatus",
    "TaskOutcome",
    "TextModel",
    # Services
    "GenerationBatch",
    "GenerationService",
    "JobPoller",
    "MetricsService",
    "TaskEvent",
    "TaskEventKind",
    "TaskRunner",
    "WebhookClient",
    "run_concurrent_tasks",
]
