"""Tests for the error taxonomy and classification predicates."""

from creativestudio.models.errors import (
    ApiError,
    ErrorCode,
    GenerationTimeoutError,
    HttpRejectionError,
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


def test_only_transient_network_errors_are_retryable():
    """Test that only TRANSIENT_NETWORK is a retryable code."""
    assert is_retryable(ErrorCode.TRANSIENT_NETWORK) is True
    for code in ErrorCode:
        if code != ErrorCode.TRANSIENT_NETWORK:
            assert is_retryable(code) is False
    assert TransientNetworkError("reset").retryable is True
    assert HttpRejectionError("bad", status_code=500).retryable is False


def test_quota_predicate_tokens():
    """Test quota detection on 429, RESOURCE_EXHAUSTED and 'quota'."""
    assert is_quota_exceeded_message("429 Too Many Requests")
    assert is_quota_exceeded_message('{"error": {"status": "RESOURCE_EXHAUSTED"}}')
    assert is_quota_exceeded_message("You exceeded your current quota")
    assert not is_quota_exceeded_message("Internal server error")


def test_safety_predicate_tokens():
    """Test safety detection on SAFETY and policy violation wording."""
    assert is_safety_filter_message("Blocked: SAFETY")
    assert is_safety_filter_message("This may be due to a safety policy violation")
    assert not is_safety_filter_message("Bad request")


def test_flags_derived_from_message():
    """Test that ApiError derives its flags from the message."""
    error = ApiError("RESOURCE_EXHAUSTED: try later")

    assert error.is_quota_exceeded is True
    assert error.is_safety_filter is False
    assert error.is_user_facing is True


def test_http_429_is_quota_exceeded():
    """Test that a 429 rejection carries the quota flag."""
    error = HttpRejectionError("Too many", status_code=429)

    assert error.is_quota_exceeded is True
    assert error.details == {"status": 429, "body": None}


def test_create_api_error_prefers_quota():
    """Test that quota messages become QuotaExceededError whatever class was asked for."""
    error = create_api_error("quota exhausted", error_cls=HttpRejectionError, status_code=400)

    assert isinstance(error, QuotaExceededError)
    assert error.error_code == ErrorCode.QUOTA_EXCEEDED
    assert error.status_code == 400


def test_create_api_error_drops_malformed_kwargs_for_quota():
    """Test that raw payloads do not break quota classification."""
    error = create_api_error("429", error_cls=MalformedResponseError, raw={"x": 1})

    assert isinstance(error, QuotaExceededError)


def test_create_api_error_keeps_requested_class():
    """Test that non-quota messages use the requested class."""
    error = create_api_error("Bad gateway", error_cls=HttpRejectionError, status_code=502, body="oops")

    assert type(error) is HttpRejectionError
    assert error.status_code == 502
    assert error.body == "oops"
    assert type(create_api_error("Generation failed")) is ApiError


def test_safety_warning_keeps_model_text():
    """Test that SafetyFilterWarning keeps the declining text."""
    warning = SafetyFilterWarning("declined", model_text="I can't do that.")

    assert warning.is_safety_filter is True
    assert warning.model_text == "I can't do that."
    assert warning.normalized().code == ErrorCode.SAFETY_FILTERED


def test_timeout_handle_only_with_request_id():
    """Test that only a submitted job yields a resumable handle."""
    assert GenerationTimeoutError("slow", url="https://x").handle is None

    error = GenerationTimeoutError(
        "slow", url="https://status", attempts_made=60, request_id="req-1", status_url="https://status"
    )
    handle = error.handle

    assert handle.request_id == "req-1"
    assert handle.attempts_made == 60
    assert handle.status_url == "https://status"


def test_normalized_shape():
    """Test conversion to NormalizedApiError."""
    normalized = HttpRejectionError("Bad request", status_code=400).normalized()

    assert normalized.message == "Bad request"
    assert normalized.code == ErrorCode.HTTP_REJECTED
    assert normalized.retryable is False
    assert normalized.details == {"status": 400, "body": None}


def test_task_failed_error_exposes_key(make_task):
    """Test that TaskFailedError is attributable to the task's key."""
    task = make_task(variant=2)
    error = TaskFailedError(task, ValueError("boom"))

    assert error.key == task.key
    assert str(error) == "boom"
