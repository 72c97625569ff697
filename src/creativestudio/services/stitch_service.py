"""Video stitching through the ffmpeg webhook."""

import logging
from typing import Callable, Optional

from creativestudio.config import StudioConfig
from creativestudio.models.errors import InvalidInputError, MalformedResponseError
from creativestudio.services.response_adapter import parse_stitcher_response
from creativestudio.services.webhook_client import WebhookClient

logger = logging.getLogger(__name__)

StitchProgress = Callable[[int, str], None]


class StitchService:
    """Joins generated clips into one video."""

    def __init__(self, client: WebhookClient, config: StudioConfig | None = None):
        self.client = client
        self.config = config or StudioConfig()

    async def stitch(self, video_urls: list[str], on_progress: Optional[StitchProgress] = None) -> bytes:
        """
        Stitch the videos in order and return the MP4 bytes.

        The service answers either with JSON naming the stitched file (which
        is then downloaded) or with the video itself.

        Raises:
            InvalidInputError: Fewer than two videos
            MalformedResponseError: Neither JSON nor a video came back
        """
        report = on_progress or (lambda percent, message: None)
        if len(video_urls) < 2:
            raise InvalidInputError("At least two videos are required to stitch.")

        report(10, "Sending request to stitching service...")
        response = await self.client.call_binary(
            self.config.endpoint("video_stitcher"), {"video_urls": video_urls}
        )
        report(50, "Stitching in progress... this can take a moment.")

        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                body = response.json()
            except ValueError as e:
                raise MalformedResponseError("Stitching service returned invalid JSON", raw=response.text[:1000]) from e
            video_url = parse_stitcher_response(body).video_url
            report(75, "Downloading stitched video...")
            video = await self.client.download(video_url)
        elif "video/" in content_type:
            report(90, "Receiving stitched video file...")
            video = response.content
        else:
            logger.error(f"❌ [StitchService] Unexpected stitcher response: {response.text[:500]}")
            raise MalformedResponseError(
                f"Unexpected response from stitching service. Content-Type: {content_type or 'none'}",
                raw=response.text[:1000],
            )

        report(100, "Stitching complete!")
        logger.info(f"🎞️ [StitchService] Stitched {len(video_urls)} clips ({len(video)} bytes)")
        return video
