"""Image upscaling through the Crystal and SeedVR webhooks."""

import logging
from enum import Enum
from typing import Callable, Literal, Optional, Sequence

from pydantic import BaseModel, Field

from creativestudio.config import StudioConfig, concurrency_for
from creativestudio.models.requests import ImageBlob
from creativestudio.services.response_adapter import normalize_error, parse_upscaler_response
from creativestudio.services.task_runner import run_concurrent_tasks
from creativestudio.services.upload_service import UploadService
from creativestudio.services.webhook_client import WebhookClient

logger = logging.getLogger(__name__)

# Sent with every SeedVR request, not user-selectable
SEEDVR_DEFAULTS = {"noise_scale": 0.1, "output_format": "jpg"}


class UpscalerModel(str, Enum):
    CRYSTAL = "crystal"
    SEEDVR = "seedvr"


class UpscaleSettings(BaseModel):
    """User settings of the upscaler studio."""

    model: UpscalerModel = UpscalerModel.SEEDVR
    scale_factor: int = Field(2, ge=1, le=4, description="Upscale factor (factor mode and Crystal)")
    upscale_mode: Literal["factor", "target"] = "target"
    target_resolution: str = Field("1440p", description="Target resolution (SeedVR target mode)")


class UpscaleItem(BaseModel):
    """One image to upscale, identified by the caller's id."""

    id: str = Field(..., min_length=1)
    image: str | ImageBlob = Field(..., description="Public URL, data URL or inline blob")


def build_upscale_payload(image_url: str, settings: UpscaleSettings) -> dict:
    if settings.model == UpscalerModel.CRYSTAL:
        return {"image_url": image_url, "scale_factor": settings.scale_factor}
    return {
        "image_url": image_url,
        "upscale_mode": settings.upscale_mode,
        "upscale_factor": settings.scale_factor,
        "target_resolution": settings.target_resolution,
        **SEEDVR_DEFAULTS,
    }


class UpscaleService:
    """Uploads inline images when needed and upscales them by public URL."""

    def __init__(
        self,
        client: WebhookClient,
        config: StudioConfig | None = None,
        upload_service: UploadService | None = None,
    ):
        self.client = client
        self.config = config or StudioConfig()
        self.upload_service = upload_service or UploadService(client, self.config)

    @staticmethod
    def endpoint_name(model: UpscalerModel) -> str:
        return f"upscaler_{model.value}"

    async def upscale(self, image: str | ImageBlob, settings: UpscaleSettings | None = None) -> str:
        """Upscale one image and return the upscaled image URL."""
        settings = settings or UpscaleSettings()
        data_url = image.data_url if isinstance(image, ImageBlob) else image
        image_url = await self.upload_service.upload_image(data_url, "upscale-source.jpg")

        raw = await self.client.call(
            self.config.endpoint(self.endpoint_name(settings.model)),
            build_upscale_payload(image_url, settings),
        )
        result = parse_upscaler_response(raw)
        logger.info(f"🔍 [UpscaleService] {settings.model.value} upscaled {image_url}")
        return result.image_url

    async def upscale_all(
        self,
        items: Sequence[UpscaleItem],
        settings: UpscaleSettings | None = None,
        on_upscaled: Optional[Callable[[str, str], None]] = None,
        on_error: Optional[Callable[[str, str], None]] = None,
        concurrency: int | None = None,
    ) -> int:
        """
        Upscale several images with bounded concurrency.

        Args:
            items: Images to upscale
            settings: Shared upscaler settings
            on_upscaled: Called with (item id, upscaled URL) per success
            on_error: Called with (item id, message) per failure
            concurrency: Worker count (defaults to the upscaler studio's value)

        Returns:
            Number of failed items
        """

        def make_job(item: UpscaleItem):
            async def job() -> tuple[str, str]:
                try:
                    return item.id, await self.upscale(item.image, settings)
                except Exception as e:
                    message = f"Failed to upscale image {item.id}: {normalize_error(e).message}"
                    if on_error:
                        on_error(item.id, message)
                    raise

            return job

        def _success(result: tuple[str, str]) -> None:
            if on_upscaled:
                on_upscaled(*result)

        def _failure(error: BaseException) -> None:
            logger.error(f"❌ [UpscaleService] {error}")

        return await run_concurrent_tasks(
            [make_job(item) for item in items],
            concurrency or concurrency_for("upscaler"),
            on_success=_success,
            on_failure=_failure,
        )
