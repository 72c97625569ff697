"""Webhook image providers: sync models answer with images, async ones with a request id."""

import logging
from typing import Any

from creativestudio.config import StudioConfig
from creativestudio.models.errors import InvalidInputError
from creativestudio.models.requests import GenerationTask, ImageModel
from creativestudio.models.responses import ImageGenerationResult
from creativestudio.models.results import AsyncJobHandle
from creativestudio.services.poller import JobPoller
from creativestudio.services.response_adapter import (
    is_async_webhook_model,
    is_webhook_model,
    parse_webhook_image_response,
    parse_webhook_submit_response,
)
from creativestudio.services.upload_service import UploadService
from creativestudio.services.webhook_client import WebhookClient

logger = logging.getLogger(__name__)

SINGLE_IMAGE_MODELS = frozenset({ImageModel.SEEDREAM.value, ImageModel.FLUX_KONTEXT.value, ImageModel.QWEN.value})

QWEN_DEFAULTS: dict[str, Any] = {
    "num_inference_steps": 30,
    "guidance_scale": 4,
    "num_images": 1,
    "enable_safety_checker": False,
    "output_format": "png",
    "negative_prompt": "blurry, ugly",
    "acceleration": "regular",
}


def build_payload(task: GenerationTask, image_urls: list[str]) -> dict[str, Any]:
    """
    Model-specific request body. Fields left unset are dropped from the payload.

    Raises:
        InvalidInputError: Unknown model, or several inputs for a single-image model
    """
    model = task.model
    if model in SINGLE_IMAGE_MODELS and len(image_urls) > 1:
        raise InvalidInputError(f"{model} only supports one input image.")

    if model == ImageModel.SEEDREAM.value:
        payload = {
            "prompt": task.prompt,
            "image_url": image_urls[0],
            "width": task.width,
            "height": task.height,
            "image_size": task.image_size,
        }
    elif model == ImageModel.FLUX_KONTEXT.value:
        payload = {"prompt": task.prompt, "image_url": image_urls[0], "aspect_ratio": task.aspect_ratio}
    elif model == ImageModel.QWEN.value:
        payload = {"prompt": task.prompt, "image_url": image_urls[0], **QWEN_DEFAULTS}
    elif model == ImageModel.NANO_BANANA.value:
        payload = {"prompt": task.prompt, "image_urls": image_urls, "aspect_ratio": task.aspect_ratio or "auto"}
    elif model == ImageModel.NANO_BANANA_PRO.value:
        payload = {
            "prompt": task.prompt,
            "image_urls": image_urls,
            "aspect_ratio": task.aspect_ratio or "auto",
            "num_images": task.num_images,
            "output_format": "jpeg",
            "resolution": task.resolution or "1K",
        }
    elif model == ImageModel.SEEDREAM_V45.value:
        payload = {
            "prompt": task.prompt,
            "image_urls": image_urls,
            "aspect_ratio": task.aspect_ratio or "auto",
            "resolution": task.resolution,
        }
    else:
        raise InvalidInputError(f"Model {model} requires an external API call, but no handler is implemented.")

    return {key: value for key, value in payload.items() if value is not None}


class WebhookImageProvider:
    """
    Image generation through the webhook models.

    Inline inputs are uploaded first so every model receives public URLs.
    Sync models return base64 images in the response; async models return a
    request id whose status endpoint is polled for image URLs.
    """

    def __init__(
        self,
        client: WebhookClient,
        config: StudioConfig | None = None,
        upload_service: UploadService | None = None,
        poll_interval_seconds: float | None = None,
        max_poll_attempts: int | None = None,
    ):
        self.client = client
        self.config = config or StudioConfig()
        self.upload_service = upload_service or UploadService(client, self.config)
        self.poll_interval_seconds = (
            poll_interval_seconds if poll_interval_seconds is not None else self.config.poll_interval_seconds
        )
        self.max_poll_attempts = max_poll_attempts or self.config.max_poll_attempts

    def poller_for(self, model: str) -> JobPoller:
        return JobPoller(
            self.client,
            self.config.status_endpoint(model),
            output_field="images",
            interval_seconds=self.poll_interval_seconds,
            max_attempts=self.max_poll_attempts,
        )

    async def public_urls(self, task: GenerationTask) -> list[str]:
        """Public URLs for every task input, uploading inline images."""
        if not task.has_inputs:
            raise InvalidInputError("At least one image source must be provided.")
        uploaded = await self.upload_service.upload_blobs(task.images) if task.images else []
        return [*task.image_urls, *uploaded]

    async def submit(self, task: GenerationTask) -> AsyncJobHandle:
        """Submit an async-model task once. Returns the handle to poll."""
        if not is_async_webhook_model(task.model):
            raise InvalidInputError(f"{task.model} is not an asynchronous model")
        payload = build_payload(task, await self.public_urls(task))
        raw = await self.client.call(self.config.endpoint(task.model), payload, max_retries=1)
        job = parse_webhook_submit_response(raw)
        logger.info(f"📨 [WebhookProvider] {task.model} accepted {task.filename} as {job.request_id}")
        return AsyncJobHandle(request_id=job.request_id, status_url=self.config.status_endpoint(task.model))

    async def resume(self, handle: AsyncJobHandle, model: str) -> ImageGenerationResult:
        """Continue polling an async job that timed out earlier."""
        status = await self.poller_for(model).resume(handle)
        return ImageGenerationResult(urls=status.output_urls)

    async def generate(self, task: GenerationTask) -> ImageGenerationResult:
        if not is_webhook_model(task.model):
            raise InvalidInputError(f"{task.model} is not a webhook model")

        if is_async_webhook_model(task.model):
            handle = await self.submit(task)
            status = await self.poller_for(task.model).poll(handle.request_id)
            return ImageGenerationResult(urls=status.output_urls)

        payload = build_payload(task, await self.public_urls(task))
        logger.info(f"🎨 [WebhookProvider] Generating {task.filename} with {task.model}")
        raw = await self.client.call(self.config.endpoint(task.model), payload)
        return parse_webhook_image_response(raw)
