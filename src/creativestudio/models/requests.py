"""Request-side models: model identifiers, image blobs and generation tasks."""

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from creativestudio.models.results import ResultKey

DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[^;,]+)?(;base64)?,(?P<data>.*)$", re.DOTALL)


class ImageModel(str, Enum):
    """Image models selectable from the studios."""

    # Native SDK model
    GEMINI_FLASH_IMAGE = "gemini-2.5-flash-image"

    # Synchronous webhook models (respond with base64 images)
    NANO_BANANA = "nano-banana"
    SEEDREAM = "seedream"
    FLUX_KONTEXT = "flux-kontext-pro"
    QWEN = "qwen"

    # Asynchronous webhook models (submit + poll, respond with image URLs)
    NANO_BANANA_PRO = "nano-banana-pro"
    SEEDREAM_V45 = "seedream-v4.5"


VIDEO_MODEL = "video"


class TextModel(str, Enum):
    """Native text models."""

    GEMINI_FLASH = "gemini-2.5-flash"
    GEMINI_PRO = "gemini-2.5-pro"


class ImageBlob(BaseModel):
    """Inline image payload: base64 data plus its MIME type."""

    model_config = ConfigDict(frozen=True)

    base64: str = Field(..., description="Base64-encoded image bytes (no data: prefix)")
    mime_type: str = Field("image/jpeg", description="MIME type of the encoded image")

    @classmethod
    def from_data_url(cls, data_url: str) -> "ImageBlob":
        """Split a ``data:{mime};base64,{data}`` URL into a blob."""
        match = DATA_URL_PATTERN.match(data_url)
        if not match:
            raise ValueError("Invalid data URL")
        return cls(base64=match.group("data"), mime_type=match.group("mime") or "image/jpeg")

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64}"


class GenerationTask(BaseModel):
    """
    One fully specified unit of generation work.

    Built by a studio's task builder and handed to the task runner exactly
    once. Instances are frozen; a retry builds a new task bound to the same key.
    """

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1, description="Rendered prompt string")
    images: tuple[ImageBlob, ...] = Field((), description="Inline input images")
    image_urls: tuple[str, ...] = Field((), description="Already public input image URLs")
    model: str = Field(ImageModel.NANO_BANANA.value, description="Model identifier")
    aspect_ratio: str = Field("auto", description="Output aspect ratio, or 'auto'")
    resolution: Optional[str] = Field(None, description="Output resolution (e.g. '1K', '720p')")
    width: Optional[int] = Field(None, ge=1, description="Output width in pixels (seedream)")
    height: Optional[int] = Field(None, ge=1, description="Output height in pixels (seedream)")
    image_size: Optional[str] = Field(None, description="Named size preset (seedream)")
    duration: Optional[str] = Field(None, description="Video duration in seconds, as sent on the wire")
    num_images: int = Field(1, ge=1, le=4, description="Images per request (async models only)")
    filename: str = Field(..., min_length=1, description="Deterministic output filename")
    key: Optional[ResultKey] = Field(None, description="Identity key of the result slot")
    labels: dict[str, str] = Field(default_factory=dict, description="Chosen option values, for display")

    @property
    def has_inputs(self) -> bool:
        return bool(self.images or self.image_urls)
