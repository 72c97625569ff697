"""Image providers for creativestudio."""

from creativestudio.providers.base import ImageProvider
from creativestudio.providers.native_provider import NativeImageProvider
from creativestudio.providers.webhook_provider import WebhookImageProvider

__all__ = ["ImageProvider", "NativeImageProvider", "WebhookImageProvider"]
