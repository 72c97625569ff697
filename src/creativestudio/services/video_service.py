"""Image-to-video generation: submit once, poll resumably."""

import logging

from creativestudio.config import StudioConfig
from creativestudio.models.errors import InvalidInputError
from creativestudio.models.requests import GenerationTask
from creativestudio.models.results import AsyncJobHandle
from creativestudio.services.poller import JobPoller
from creativestudio.services.response_adapter import parse_webhook_submit_response
from creativestudio.services.upload_service import UploadService
from creativestudio.services.webhook_client import WebhookClient

logger = logging.getLogger(__name__)

VIDEO_DEFAULTS = {"aspect_ratio": "auto", "resolution": "720p", "duration": "5"}


class VideoService:
    """
    Generates a short clip from a start image (and optional end image).

    ``generate`` is submit + wait. Callers holding an AsyncJobHandle from a
    timed-out wait call ``resume`` instead of submitting again.
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
        self.poller = JobPoller(
            client,
            self.config.status_endpoint("video"),
            output_field="videos",
            interval_seconds=(
                poll_interval_seconds if poll_interval_seconds is not None else self.config.poll_interval_seconds
            ),
            max_attempts=max_poll_attempts or self.config.max_poll_attempts,
        )

    @staticmethod
    def build_payload(task: GenerationTask, image_urls: list[str]) -> dict:
        if not task.prompt.strip():
            raise InvalidInputError("Video prompt is missing.")
        if not image_urls:
            raise InvalidInputError("A start image is required for video generation.")

        payload = {
            "prompt": task.prompt,
            "image_url": image_urls[0],
            "aspect_ratio": task.aspect_ratio or VIDEO_DEFAULTS["aspect_ratio"],
            "resolution": task.resolution or VIDEO_DEFAULTS["resolution"],
            "duration": task.duration or VIDEO_DEFAULTS["duration"],
        }
        if len(image_urls) > 1:
            payload["end_image_url"] = image_urls[1]
        return payload

    async def submit(self, task: GenerationTask) -> AsyncJobHandle:
        """Start generation and return the handle to poll. Never retried automatically."""
        uploaded = await self.upload_service.upload_blobs(task.images, prefix="video-frame") if task.images else []
        payload = self.build_payload(task, [*task.image_urls, *uploaded])
        raw = await self.client.call(self.config.endpoint("video"), payload, max_retries=1)
        job = parse_webhook_submit_response(raw)
        logger.info(f"🎬 [VideoService] Submitted {task.filename} as {job.request_id}")
        return AsyncJobHandle(request_id=job.request_id, status_url=self.poller.status_url)

    async def wait(self, handle: AsyncJobHandle) -> str:
        """Poll until the clip is ready and return its URL."""
        if handle.attempts_made:
            return await self.resume(handle)
        status = await self.poller.poll(handle.request_id)
        return status.output_url

    async def resume(self, handle: AsyncJobHandle) -> str:
        status = await self.poller.resume(handle)
        return status.output_url

    async def generate(self, task: GenerationTask) -> str:
        handle = await self.submit(task)
        return await self.wait(handle)
