"""Native Gemini image provider (google-genai SDK)."""

import base64
import logging
import os
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from creativestudio.config import NATIVE_IMAGE_MODEL
from creativestudio.models.errors import (
    HttpRejectionError,
    InvalidInputError,
    TransientNetworkError,
    create_api_error,
)
from creativestudio.models.requests import GenerationTask
from creativestudio.models.responses import ImageGenerationResult
from creativestudio.services.response_adapter import parse_native_image_response
from creativestudio.services.retry_service import build_retry_config, retry_with_backoff

logger = logging.getLogger(__name__)


def build_client(api_key: str | None = None) -> genai.Client:
    """Create the SDK client, reading GEMINI_API_KEY / GOOGLE_API_KEY when no key is passed."""
    key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    if not key:
        raise ValueError("Gemini API key is required. Set GEMINI_API_KEY environment variable or pass api_key.")
    return genai.Client(api_key=key)


def response_to_dict(response: Any) -> dict[str, Any]:
    """
    Flatten an SDK response into the ``{candidates[0].content.parts[]}`` shape.

    Inline image bytes are base64-encoded so the adapter only sees JSON types.
    """
    parts: list[dict[str, Any]] = []
    candidates = getattr(response, "candidates", None) or []
    content = getattr(candidates[0], "content", None) if candidates else None
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        data = getattr(inline, "data", None) if inline is not None else None
        if data:
            encoded = base64.b64encode(data).decode("ascii") if isinstance(data, (bytes, bytearray)) else data
            parts.append({"inlineData": {"data": encoded, "mimeType": getattr(inline, "mime_type", None)}})
            continue
        text = getattr(part, "text", None)
        if text:
            parts.append({"text": text})

    text = "".join(part["text"] for part in parts if "text" in part) or None
    return {"candidates": [{"content": {"parts": parts}}] if candidates else [], "text": text}


async def call_native(coro_factory, *args: Any, **kwargs: Any) -> Any:
    """
    Run one SDK call, mapping SDK failures onto the shared error taxonomy.

    SDK API errors keep their status so quota exhaustion (429 /
    RESOURCE_EXHAUSTED) is classified the same way as webhook rejections.
    """
    try:
        return await coro_factory(*args, **kwargs)
    except genai_errors.APIError as e:
        status = " ".join(str(token) for token in (e.code, e.status) if token)
        message = f"{status}: {e.message or e}" if status else str(e.message or e)
        raise create_api_error(message, error_cls=HttpRejectionError, status_code=e.code, original_exception=e) from e
    except httpx.TransportError as e:
        raise TransientNetworkError(f"Network error calling Gemini: {e}", original_exception=e) from e


class NativeImageProvider:
    """Generates images with the native SDK, inputs sent inline."""

    def __init__(
        self,
        client: genai.Client | None = None,
        api_key: str | None = None,
        model: str = NATIVE_IMAGE_MODEL,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout_seconds: float | None = 120.0,
    ):
        """
        Initialize native provider.

        Args:
            client: Existing SDK client (built from api_key / env when omitted)
            api_key: Gemini API key (defaults to GEMINI_API_KEY env var)
            model: SDK image model name
            max_retries: Total attempts for network failures
            retry_delay: Base backoff delay in seconds
            timeout_seconds: Per-attempt timeout
        """
        self.client = client or build_client(api_key)
        self.model = model
        self.retry_config = build_retry_config(max_retries, retry_delay)
        self.timeout_seconds = timeout_seconds

    @staticmethod
    def build_config(aspect_ratio: str | None) -> types.GenerateContentConfig:
        if aspect_ratio and aspect_ratio != "auto":
            return types.GenerateContentConfig(
                response_modalities=["IMAGE", "TEXT"],
                image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
            )
        return types.GenerateContentConfig(response_modalities=["IMAGE", "TEXT"])

    @staticmethod
    def build_contents(task: GenerationTask) -> list[Any]:
        parts: list[Any] = [
            types.Part.from_bytes(data=base64.b64decode(blob.base64), mime_type=blob.mime_type)
            for blob in task.images
        ]
        parts.append(types.Part.from_text(text=task.prompt))
        return [types.Content(role="user", parts=parts)]

    async def generate(self, task: GenerationTask) -> ImageGenerationResult:
        if not task.images:
            raise InvalidInputError("At least one image source must be provided.")

        logger.info(f"🎨 [NativeProvider] Generating {task.filename} with {self.model}")
        response = await retry_with_backoff(
            call_native,
            self.client.aio.models.generate_content,
            model=self.model,
            contents=self.build_contents(task),
            config=self.build_config(task.aspect_ratio),
            retry_config=self.retry_config,
            timeout_seconds=self.timeout_seconds,
        )
        return parse_native_image_response(response_to_dict(response))
