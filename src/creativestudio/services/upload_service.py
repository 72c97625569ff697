"""Upload of inline images and videos to the public bucket webhooks."""

import asyncio
import logging
import time

from creativestudio.config import StudioConfig
from creativestudio.models.requests import ImageBlob
from creativestudio.services.response_adapter import parse_upload_response
from creativestudio.services.webhook_client import WebhookClient
from creativestudio.utils.image_utils import is_public_url

logger = logging.getLogger(__name__)


class UploadService:
    """Service for turning data URLs into public URLs via the upload webhooks."""

    def __init__(self, client: WebhookClient, config: StudioConfig | None = None):
        """
        Initialize upload service.

        Args:
            client: Shared webhook client
            config: Endpoint configuration (defaults read from the environment)
        """
        self.client = client
        self.config = config or StudioConfig()

    async def upload_image(self, image_url: str, filename: str | None = None) -> str:
        """
        Upload an image data URL and return its public URL.

        Public http(s) URLs are returned unchanged without a request.
        """
        if is_public_url(image_url):
            return image_url

        raw = await self.client.call(
            self.config.endpoint("image_upload"),
            {"image_url": image_url, "filename": filename},
        )
        public_url = parse_upload_response(raw).public_url
        logger.info(f"📤 [UploadService] Uploaded {filename or 'image'} -> {public_url}")
        return public_url

    async def upload_blobs(self, blobs: list[ImageBlob] | tuple[ImageBlob, ...], prefix: str = "upload") -> list[str]:
        """Upload several inline images concurrently, preserving order."""
        stamp = int(time.time() * 1000)
        return list(
            await asyncio.gather(
                *(
                    self.upload_image(blob.data_url, f"{prefix}-{stamp}-{index}.jpg")
                    for index, blob in enumerate(blobs)
                )
            )
        )

    async def upload_video(self, file_url: str, filename: str | None = None) -> str:
        """Upload a video data URL and return its public bucket URL."""
        if is_public_url(file_url):
            return file_url

        raw = await self.client.call(
            self.config.endpoint("video_upload"),
            {"file_url": file_url, "filename": filename},
        )
        public_url = parse_upload_response(raw).public_url
        logger.info(f"📤 [UploadService] Uploaded video {filename or ''} -> {public_url}")
        return public_url
