"""Error codes, classification predicates and the exception taxonomy."""

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Error category codes for generation operations."""

    # Retryable errors (retryable=True)
    TRANSIENT_NETWORK = "TRANSIENT_NETWORK"

    # Not retryable errors (retryable=False)
    TIMEOUT = "TIMEOUT"
    HTTP_REJECTED = "HTTP_REJECTED"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    SAFETY_FILTERED = "SAFETY_FILTERED"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    INVALID_INPUT = "INVALID_INPUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# Set of retryable error codes
RETRYABLE_ERRORS = {
    ErrorCode.TRANSIENT_NETWORK,
}

QUOTA_TOKENS = ("429", "RESOURCE_EXHAUSTED", "quota")
SAFETY_TOKENS = ("SAFETY", "safety", "policy violation")


def is_retryable(code: ErrorCode) -> bool:
    """Check if an error code indicates a retryable error."""
    return code in RETRYABLE_ERRORS


def is_quota_exceeded_message(message: str) -> bool:
    """Check if a provider message reports an exhausted quota."""
    return any(token in message for token in QUOTA_TOKENS)


def is_safety_filter_message(message: str) -> bool:
    """Check if a provider message reports a safety/policy rejection."""
    return any(token in message for token in SAFETY_TOKENS)


class ApiError(Exception):
    """
    Base exception for every failure surfaced by providers and adapters.

    Quota and safety flags are derived from the message with the shared
    predicates unless set explicitly.
    """

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        is_user_facing: bool = True,
        is_safety_filter: bool = False,
        is_quota_exceeded: bool = False,
        original_exception: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.is_user_facing = is_user_facing
        self.is_safety_filter = is_safety_filter or is_safety_filter_message(message)
        self.is_quota_exceeded = is_quota_exceeded or is_quota_exceeded_message(message)
        self.original_exception = original_exception

    @property
    def retryable(self) -> bool:
        return is_retryable(self.error_code)

    def normalized(self):
        """Return the serialisable NormalizedApiError shape for this error."""
        from creativestudio.models.responses import NormalizedApiError

        return NormalizedApiError(
            message=self.message,
            is_user_facing=self.is_user_facing,
            is_safety_filter=self.is_safety_filter,
            is_quota_exceeded=self.is_quota_exceeded,
            code=self.error_code,
            retryable=self.retryable,
            details=self.details or None,
        )


class TransientNetworkError(ApiError):
    """Transport-level failure (connection refused, reset, DNS). Retried with backoff."""

    error_code = ErrorCode.TRANSIENT_NETWORK


class GenerationTimeoutError(ApiError):
    """
    A request or a polling sequence ran out of time.

    Carries enough context for the caller to resume instead of resubmitting:
    the target URL, the original payload, the attempts made and, for polled
    jobs, the provider request id.
    """

    error_code = ErrorCode.TIMEOUT

    def __init__(
        self,
        message: str,
        url: str | None = None,
        payload: Any = None,
        attempts_made: int = 0,
        request_id: str | None = None,
        status_url: str | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message,
            details={"url": url, "attempts_made": attempts_made, "request_id": request_id},
            original_exception=original_exception,
        )
        self.url = url
        self.payload = payload
        self.attempts_made = attempts_made
        self.request_id = request_id
        self.status_url = status_url

    @property
    def handle(self):
        """Resumable polling handle, or None when no job was ever submitted."""
        if self.request_id is None:
            return None
        from creativestudio.models.results import AsyncJobHandle

        return AsyncJobHandle(
            request_id=self.request_id,
            attempts_made=self.attempts_made,
            status_url=self.status_url,
        )


class HttpRejectionError(ApiError):
    """The provider answered with a 4xx/5xx. Definitive, never retried automatically."""

    error_code = ErrorCode.HTTP_REJECTED

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: Any = None,
        **kwargs: Any,
    ):
        kwargs.setdefault("details", {"status": status_code, "body": body})
        if status_code == 429:
            kwargs["is_quota_exceeded"] = True
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.body = body


class QuotaExceededError(HttpRejectionError):
    """The account or API key ran out of quota."""

    error_code = ErrorCode.QUOTA_EXCEEDED

    def __init__(self, message: str, status_code: int | None = None, body: Any = None, **kwargs: Any):
        kwargs["is_quota_exceeded"] = True
        super().__init__(message, status_code=status_code, body=body, **kwargs)


class SafetyFilterWarning(ApiError):
    """The call succeeded but the model declined to produce an image."""

    error_code = ErrorCode.SAFETY_FILTERED

    def __init__(self, message: str, model_text: str | None = None, **kwargs: Any):
        kwargs["is_safety_filter"] = True
        kwargs.setdefault("details", {"model_text": model_text})
        super().__init__(message, **kwargs)
        self.model_text = model_text


class MalformedResponseError(ApiError):
    """The response violated the provider's schema or was not valid JSON."""

    error_code = ErrorCode.MALFORMED_RESPONSE

    def __init__(self, message: str, raw: Any = None, **kwargs: Any):
        kwargs.setdefault("details", {"raw": raw})
        super().__init__(message, **kwargs)
        self.raw = raw


class InvalidInputError(ApiError):
    """The task could not be dispatched as specified."""

    error_code = ErrorCode.INVALID_INPUT


def create_api_error(
    message: str,
    error_cls: type[ApiError] = ApiError,
    status_code: int | None = None,
    **kwargs: Any,
) -> ApiError:
    """
    Build the ApiError for a provider failure message.

    Quota exhaustion always wins over the requested class.

    Args:
        message: Provider or transport message
        error_cls: Error class to use when the message is not a quota error
        status_code: HTTP status, when the failure came from an HTTP response
        **kwargs: Extra constructor arguments (details, body, raw, ...)

    Returns:
        The classified error instance (not raised)
    """
    if status_code == 429 or is_quota_exceeded_message(message):
        kwargs.pop("raw", None)
        kwargs.pop("model_text", None)
        return QuotaExceededError(message, status_code=status_code, **kwargs)
    if issubclass(error_cls, HttpRejectionError):
        return error_cls(message, status_code=status_code, **kwargs)
    return error_cls(message, **kwargs)


class TaskFailedError(Exception):
    """
    Failure of one runner job, attributable to its task.

    ``error`` is the underlying exception; ``task`` is the GenerationTask
    (and so its identity key) the job was running.
    """

    def __init__(self, task: Any, error: BaseException):
        super().__init__(str(error))
        self.task = task
        self.error = error

    @property
    def key(self):
        return getattr(self.task, "key", None)
