"""Models package for creativestudio."""

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
    create_api_error,
    is_quota_exceeded_message,
    is_retryable,
    is_safety_filter_message,
)
from creativestudio.models.metrics import BatchMetrics
from creativestudio.models.requests import VIDEO_MODEL, GenerationTask, ImageBlob, ImageModel, TextModel
from creativestudio.models.responses import (
    AdConcepts,
    AdPrompt,
    AdVariation,
    ImageGenerationResult,
    JobStatus,
    JobStatusResult,
    NormalizedApiError,
    StitcherResult,
    SubmittedJob,
    TaskOutcome,
    UploadResult,
    UpscaleResult,
)
from creativestudio.models.results import (
    AsyncJobHandle,
    BatchSummary,
    GenerationResult,
    ProgressCounter,
    ResultKey,
    ResultStatus,
)

__all__ = [
    "AdConcepts",
    "AdPrompt",
    "AdVariation",
    "ApiError",
    "AsyncJobHandle",
    "BatchMetrics",
    "BatchSummary",
    "ErrorCode",
    "GenerationResult",
    "GenerationTask",
    "GenerationTimeoutError",
    "HttpRejectionError",
    "ImageBlob",
    "ImageGenerationResult",
    "ImageModel",
    "InvalidInputError",
    "JobStatus",
    "JobStatusResult",
    "MalformedResponseError",
    "NormalizedApiError",
    "ProgressCounter",
    "QuotaExceededError",
    "ResultKey",
    "ResultStatus",
    "SafetyFilterWarning",
    "StitcherResult",
    "SubmittedJob",
    "TaskFailedError",
    "TaskOutcome",
    "TextModel",
    "TransientNetworkError",
    "UploadResult",
    "UpscaleResult",
    "VIDEO_MODEL",
    "create_api_error",
    "is_quota_exceeded_message",
    "is_retryable",
    "is_safety_filter_message",
]
