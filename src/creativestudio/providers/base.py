"""Base provider interface for image generation."""

from typing import Protocol

from typing_extensions import runtime_checkable

from creativestudio.models.requests import GenerationTask
from creativestudio.models.responses import ImageGenerationResult


@runtime_checkable
class ImageProvider(Protocol):
    """Protocol for image generation providers."""

    async def generate(self, task: GenerationTask) -> ImageGenerationResult:
        """
        Generate an image for one task.

        Args:
            task: Prompt, input images and output options

        Returns:
            Normalized image result (data URL or public URLs)

        Raises:
            ApiError: Any classified provider failure
        """
        ...
