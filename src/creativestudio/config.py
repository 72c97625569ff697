"""Model identifiers, webhook endpoints and runtime defaults."""

import os
from dataclasses import dataclass, field

from creativestudio.models.requests import ImageModel, TextModel

DEFAULT_WEBHOOK_BASE_URL = "https://n8n.cemil.al/webhook"

# The UI dev server cannot reach the proxy route
DEV_SERVER_PORT = "5173"
WEBHOOK_PROXY_PATH = "/webhook-proxy"

DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_SECONDS = 1.0
DEFAULT_TIMEOUT_SECONDS = 120.0

POLL_INTERVAL_SECONDS = 5.0
MAX_POLL_ATTEMPTS = 60

NATIVE_IMAGE_MODEL = ImageModel.GEMINI_FLASH_IMAGE.value
NATIVE_TEXT_MODEL = TextModel.GEMINI_FLASH.value

# Worker counts per studio, tuned to each provider's rate limits
STUDIO_CONCURRENCY: dict[str, int] = {
    "hair": 6,
    "architecture": 6,
    "baby": 4,
    "video": 8,
    "timeline": 8,
    "image": 10,
    "pro": 5,
    "video_prompts": 6,
    "ad_cloner": 4,
    "upscaler": 3,
}

ENDPOINT_PATHS: dict[str, str] = {
    # Sync image models
    ImageModel.SEEDREAM.value: "5aff8ad1-c2f0-4d54-a375-3cc47d0f51cd/fal/edit-seedream-4.0",
    ImageModel.FLUX_KONTEXT.value: "3bd7adc2-c5ef-4e89-b43e-b0b0c063f199/fal/edit-flux-kontext",
    ImageModel.NANO_BANANA.value: "7c6e2f5c-24aa-4650-9152-3d718bd69f8c/higgsfield/edit-nano-banana",
    ImageModel.QWEN.value: "5533f0bb-064a-4757-adcb-56793505fdf3/fal/edit-qwen",
    # Async image models
    ImageModel.NANO_BANANA_PRO.value: "7c6e2f5c-24aa-4650-9152-3d718bd69f8c/higgsfield/edit-nano-banana-pro",
    ImageModel.SEEDREAM_V45.value: "7c6e2f5c-24aa-4650-9152-3d718bd69f8c/higgsfield/edit-seedream-v4.5",
    # Video
    "video": "fbe9280c-07a6-451c-abdd-cf261c501856/higgsfield/video-seedance-v1-pro/image-to-video",
    # Uploads and stitching
    "image_upload": "fbe9280c-07a6-451c-abdd-cf261c501856/ai-studio/image-upload-google-bucket",
    "video_upload": "f123280c-0226-451c-abdd-cf26as301856/ai-studio/gcs-upload-google-bucket",
    "video_stitcher": "5533f0bb-064a-4757-adcb-56793505fdf3/ffmpeg/stitch",
    # Upscalers
    "upscaler_crystal": "3bd7adc2-c5ef-4e89-b43e-b0b0c063f199/fal/crystal-upscaler",
    "upscaler_seedvr": "3bd7adc2-c5ef-4e89-b43e-b0b0c063f199/fal/seedvr2-upscaler",
}

STATUS_ENDPOINT_PATHS: dict[str, str] = {
    ImageModel.NANO_BANANA_PRO.value: "7c6e2f5c-24aa-4650-9152-3d718bd69f8c/higgsfield/check/edit-nano-banana-pro",
    ImageModel.SEEDREAM_V45.value: "7c6e2f5c-24aa-4650-9152-3d718bd69f8c/higgsfield/check/edit-seedream-v4.5",
    "video": "cddfdbbb-8b1a-40c0-9a4b-8fee6dcf3747/higgsfield/check/video-seedance-v1-pro/image-to-video",
}


@dataclass
class StudioConfig:
    """
    Runtime configuration shared by the client, providers and services.

    Every field falls back to its environment variable, then to the
    built-in default.
    """

    webhook_base_url: str = field(
        default_factory=lambda: os.getenv("STUDIO_WEBHOOK_BASE_URL", DEFAULT_WEBHOOK_BASE_URL)
    )
    gemini_api_key: str | None = field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    )
    proxy_url: str | None = field(default_factory=lambda: os.getenv("STUDIO_WEBHOOK_PROXY_URL"))
    served_port: str | None = field(default_factory=lambda: os.getenv("STUDIO_SERVED_PORT"))
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY_SECONDS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    poll_interval_seconds: float = POLL_INTERVAL_SECONDS
    max_poll_attempts: int = MAX_POLL_ATTEMPTS

    def endpoint(self, name: str) -> str:
        """Full URL of a generation/upload endpoint by model id or name."""
        try:
            path = ENDPOINT_PATHS[name]
        except KeyError:
            raise ValueError(f"No webhook endpoint configured for '{name}'") from None
        return f"{self.webhook_base_url.rstrip('/')}/{path}"

    def status_endpoint(self, name: str) -> str:
        """Full URL of the status endpoint an async job is polled on."""
        try:
            path = STATUS_ENDPOINT_PATHS[name]
        except KeyError:
            raise ValueError(f"No status endpoint configured for '{name}'") from None
        return f"{self.webhook_base_url.rstrip('/')}/{path}"


def concurrency_for(studio: str, default: int = 4) -> int:
    return STUDIO_CONCURRENCY.get(studio, default)
