"""Routes generation tasks to the provider that serves their model."""

import logging
from typing import Any, Awaitable, Callable

from creativestudio.config import StudioConfig
from creativestudio.models.errors import InvalidInputError, TaskFailedError
from creativestudio.models.requests import VIDEO_MODEL, GenerationTask
from creativestudio.models.responses import TaskOutcome
from creativestudio.providers.base import ImageProvider
from creativestudio.providers.native_provider import NativeImageProvider
from creativestudio.providers.webhook_provider import WebhookImageProvider
from creativestudio.services.response_adapter import is_native_model, is_webhook_model
from creativestudio.services.upload_service import UploadService
from creativestudio.services.video_service import VideoService
from creativestudio.services.webhook_client import WebhookClient

logger = logging.getLogger(__name__)


class GenerationService:
    """Unified entry point for image and video tasks across providers."""

    def __init__(
        self,
        client: WebhookClient | None = None,
        config: StudioConfig | None = None,
        native_provider: ImageProvider | None = None,
        webhook_provider: ImageProvider | None = None,
        video_service: VideoService | None = None,
    ):
        """
        Initialize generation service.

        Args:
            client: Shared webhook client (created from config when omitted)
            config: Endpoint and default configuration
            native_provider: Provider for native SDK models (created lazily)
            webhook_provider: Provider for webhook image models
            video_service: Service for image-to-video tasks
        """
        self.config = config or StudioConfig()
        self.client = client or WebhookClient(
            proxy_url=self.config.proxy_url,
            served_port=self.config.served_port,
            max_retries=self.config.max_retries,
            retry_delay=self.config.retry_delay,
            timeout_seconds=self.config.timeout_seconds,
        )
        upload_service = UploadService(self.client, self.config)
        self._native_provider = native_provider
        self.webhook_provider = webhook_provider or WebhookImageProvider(self.client, self.config, upload_service)
        self.video_service = video_service or VideoService(self.client, self.config, upload_service)

    @property
    def native_provider(self) -> ImageProvider:
        # Needs an API key, so only built when a native task shows up
        if self._native_provider is None:
            self._native_provider = NativeImageProvider(api_key=self.config.gemini_api_key)
        return self._native_provider

    def provider_for(self, model: str) -> ImageProvider:
        if is_native_model(model):
            return self.native_provider
        if is_webhook_model(model):
            return self.webhook_provider
        raise InvalidInputError(f"Unsupported model: {model}")

    async def generate(self, task: GenerationTask) -> str:
        """Run one task and return its output URL (or data URI)."""
        logger.debug(f"🎯 [GenerationService] Dispatching {task.filename} to {task.model}")
        if task.model == VIDEO_MODEL:
            return await self.video_service.generate(task)
        result = await self.provider_for(task.model).generate(task)
        return result.data_url

    def make_job(self, task: GenerationTask) -> Callable[[], Awaitable[TaskOutcome]]:
        """
        Zero-argument job for the task runner.

        Failures are raised as TaskFailedError so they stay attributable to
        the task's identity key.
        """

        async def job() -> TaskOutcome:
            try:
                url = await self.generate(task)
            except Exception as e:
                raise TaskFailedError(task, e) from e
            return TaskOutcome(task=task, url=url)

        return job

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "GenerationService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
