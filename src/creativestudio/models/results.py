"""Result-side models: identity keys, tagged results, progress and job handles."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ResultKey(BaseModel):
    """
    Identity of one result slot: batch timestamp + source index + variant index.

    Hashable so it can key result stores; the string form is the legacy
    ``{timestamp}-{source}-{variant}`` id.
    """

    model_config = ConfigDict(frozen=True)

    batch_timestamp: str = Field(..., min_length=1, description="Timestamp shared by the whole batch")
    source_index: int = Field(0, ge=0, description="Index of the source image")
    variant_index: int = Field(0, ge=0, description="Index of the prompt/variant for that source")

    def __str__(self) -> str:
        return f"{self.batch_timestamp}-{self.source_index}-{self.variant_index}"

    @classmethod
    def parse(cls, value: str) -> "ResultKey":
        timestamp, source, variant = value.rsplit("-", 2)
        return cls(batch_timestamp=timestamp, source_index=int(source), variant_index=int(variant))


class ResultStatus(str, Enum):
    """Lifecycle states of a result slot."""

    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"


class GenerationResult(BaseModel):
    """Tagged result for one slot: pending, success, error or warning."""

    key: ResultKey = Field(..., description="Identity key of the slot")
    status: ResultStatus = Field(ResultStatus.PENDING, description="Current state")
    url: Optional[str] = Field(None, description="Output URL or data URI (success only)")
    prompt: Optional[str] = Field(None, description="Exact prompt used")
    error: Optional[str] = Field(None, description="User-facing message (error/warning only)")
    model_response: Optional[str] = Field(None, description="Raw model text that declined to produce an image")
    filename: Optional[str] = Field(None, description="Output filename")
    labels: dict[str, str] = Field(default_factory=dict, description="Chosen option values")

    @model_validator(mode="after")
    def validate_status_shape(self):
        """Ensure each status carries exactly the fields it should."""
        if self.status == ResultStatus.SUCCESS:
            if not self.url:
                raise ValueError("url must be present when status=success")
            if self.error is not None:
                raise ValueError("error must be None when status=success")
        elif self.status in (ResultStatus.ERROR, ResultStatus.WARNING):
            if not self.error:
                raise ValueError(f"error must be present when status={self.status.value}")
            if self.url is not None:
                raise ValueError(f"url must be None when status={self.status.value}")
            if self.status == ResultStatus.WARNING and self.model_response is None:
                raise ValueError("model_response must be present when status=warning")
        else:
            if self.url is not None or self.error is not None:
                raise ValueError("pending results carry neither url nor error")
        return self

    @property
    def is_retryable_slot(self) -> bool:
        """True for the failed subset that 'retry all failed' resubmits."""
        return self.status in (ResultStatus.ERROR, ResultStatus.WARNING)


class ProgressCounter(BaseModel):
    """Batch progress. ``completed`` only ever grows."""

    completed: int = Field(0, ge=0)
    total: int = Field(0, ge=0)

    def advance(self) -> "ProgressCounter":
        if self.completed >= self.total:
            raise ValueError("progress cannot exceed total")
        self.completed += 1
        return self

    def extend(self, count: int) -> "ProgressCounter":
        """Add work to a running batch without touching what already completed."""
        if count < 0:
            raise ValueError("progress total cannot shrink")
        self.total += count
        return self

    @property
    def done(self) -> bool:
        return self.completed == self.total


class AsyncJobHandle(BaseModel):
    """Resumable handle for a job already submitted to an async provider."""

    request_id: str = Field(..., min_length=1, description="Provider request id")
    attempts_made: int = Field(0, ge=0, description="Status polls already spent")
    status_url: Optional[str] = Field(None, description="Status endpoint the job is polled on")


class BatchSummary(BaseModel):
    """Aggregate outcome of a batch run."""

    total: int = Field(0, ge=0)
    succeeded: int = Field(0, ge=0)
    failed: int = Field(0, ge=0, description="Hard errors plus warnings")
    warnings: int = Field(0, ge=0, description="Subset of failed that were safety/declined")

    @property
    def has_failures(self) -> bool:
        return self.failed > 0
