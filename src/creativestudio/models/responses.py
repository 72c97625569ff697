"""Normalized response models produced by the response adapter."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from creativestudio.models.errors import ErrorCode
from creativestudio.models.requests import GenerationTask


class NormalizedApiError(BaseModel):
    """Serialisable shape every provider failure is funneled into."""

    message: str = Field(..., description="User-facing error message")
    is_user_facing: bool = Field(True, description="Whether the message may be shown verbatim")
    is_safety_filter: bool = Field(False, description="The provider declined on safety/policy grounds")
    is_quota_exceeded: bool = Field(False, description="The account or key ran out of quota")
    code: ErrorCode = Field(ErrorCode.INTERNAL_ERROR, description="Error category code")
    retryable: bool = Field(False, description="Whether the request may be retried automatically")
    details: Optional[dict] = Field(None, description="Optional additional context for debugging")


class ImageGenerationResult(BaseModel):
    """A generated image as a data URL (sync models) or public URLs (async models)."""

    data_url: Optional[str] = Field(None, description="data:{mime};base64,{data} or a public URL")
    urls: list[str] = Field(default_factory=list, description="All returned image URLs")

    @model_validator(mode="after")
    def validate_has_image(self):
        if not self.data_url and not self.urls:
            raise ValueError("an image result needs data_url or urls")
        if self.data_url is None:
            self.data_url = self.urls[0]
        return self


class SubmittedJob(BaseModel):
    """Acknowledgement of an async submission."""

    request_id: str = Field(..., min_length=1)


class JobStatus(str, Enum):
    GENERATING = "generating"
    COMPLETED = "completed"


class JobStatusResult(BaseModel):
    """One status poll: still generating, or completed with output URLs."""

    status: JobStatus
    output_urls: list[str] = Field(default_factory=list)

    @property
    def output_url(self) -> Optional[str]:
        return self.output_urls[0] if self.output_urls else None


class UploadResult(BaseModel):
    public_url: str = Field(..., min_length=1)


class StitcherResult(BaseModel):
    video_url: str = Field(..., min_length=1)


class UpscaleResult(BaseModel):
    image_url: str = Field(..., min_length=1)


class TaskOutcome(BaseModel):
    """Successful result of one task: the task and its output URL or data URI."""

    model_config = ConfigDict(frozen=True)

    task: GenerationTask
    url: str = Field(..., min_length=1)


class AdPrompt(BaseModel):
    """A described ad: a control-tagged title plus structured detail blocks."""

    title: str = Field(..., description="Display title; control tags follow '||'")
    details: list[dict[str, Any]] = Field(default_factory=list, description="Structured description blocks")

    @property
    def display_title(self) -> str:
        return self.title.split("||")[0].strip()


class AdVariation(AdPrompt):
    """One ad variation with the instructional edit prompt sent to the image model."""

    prompt: str = Field(..., description="Edit instructions applied to the original ad")


class AdConcepts(BaseModel):
    """Base description of a sample ad and its variations."""

    base_prompt: AdPrompt
    variations: list[AdVariation] = Field(default_factory=list)
