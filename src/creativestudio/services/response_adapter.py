"""
Response adapter: the only place raw provider payloads are inspected.

Each parser takes an already JSON-decoded payload and returns one of the
normalized result models, or raises an ApiError subclass. Routing between
native and webhook parsers goes through the model predicates below.
"""

import json
import logging
import re
from typing import Any, Iterable, Optional

from creativestudio.models.errors import (
    ApiError,
    ErrorCode,
    GenerationTimeoutError,
    MalformedResponseError,
    SafetyFilterWarning,
    TransientNetworkError,
    create_api_error,
    is_quota_exceeded_message,
    is_safety_filter_message,
)
from creativestudio.models.requests import ImageModel
from creativestudio.models.responses import (
    ImageGenerationResult,
    JobStatus,
    JobStatusResult,
    NormalizedApiError,
    StitcherResult,
    SubmittedJob,
    UploadResult,
    UpscaleResult,
)
from creativestudio.utils.image_utils import is_public_url
from creativestudio.utils.logging_utils import sanitize_for_logging

logger = logging.getLogger(__name__)

SYNC_WEBHOOK_MODELS = frozenset(
    {
        ImageModel.NANO_BANANA.value,
        ImageModel.SEEDREAM.value,
        ImageModel.FLUX_KONTEXT.value,
        ImageModel.QWEN.value,
    }
)
ASYNC_WEBHOOK_MODELS = frozenset({ImageModel.NANO_BANANA_PRO.value, ImageModel.SEEDREAM_V45.value})

SAFETY_DECLINE_MESSAGE = (
    "The model returned a text response instead of an image. "
    "This may be due to a safety policy violation or an unclear prompt."
)

_JSON_BLOCK = re.compile(r"```json\s*([\s\S]*?)\s*```|(\{[\s\S]*\}|\[[\s\S]*\])")
_EMBEDDED_JSON = re.compile(r"\{.*\}", re.DOTALL)


# Context detection


def is_native_model(model: str) -> bool:
    """True for models served by the native SDK."""
    return model == ImageModel.GEMINI_FLASH_IMAGE.value or model.startswith(("gemini-", "imagen-"))


def is_async_webhook_model(model: str) -> bool:
    """True for webhook models that answer with a request id and must be polled."""
    return model in ASYNC_WEBHOOK_MODELS


def is_webhook_model(model: str) -> bool:
    """True for every webhook-reached model, sync or async."""
    return model in SYNC_WEBHOOK_MODELS or is_async_webhook_model(model)


def _malformed(message: str, raw: Any) -> MalformedResponseError:
    logger.error(f"❌ [ResponseAdapter] {message}: {json.dumps(sanitize_for_logging(raw), default=str)[:2000]}")
    return MalformedResponseError(message, raw=raw)


def _string_list(value: Any) -> list[str]:
    """Non-empty list of strings, or [] when the field is missing or invalid."""
    if isinstance(value, list) and value and all(isinstance(item, str) and item for item in value):
        return list(value)
    return []


def _error_field(response: dict[str, Any], fields: Iterable[str] = ("Error", "error")) -> Optional[str]:
    for name in fields:
        value = response.get(name)
        if value:
            if isinstance(value, dict):
                return str(value.get("message") or json.dumps(value))
            return str(value)
    return None


# Native SDK parsers


def _native_parts(response: dict[str, Any]) -> list[dict[str, Any]]:
    candidates = response.get("candidates") or []
    if not candidates:
        return []
    content = candidates[0].get("content") or {}
    return content.get("parts") or []


def _native_text(response: dict[str, Any]) -> Optional[str]:
    text = response.get("text")
    if text:
        return text
    texts = [part["text"] for part in _native_parts(response) if part.get("text")]
    return "".join(texts) or None


def parse_native_image_response(response: dict[str, Any]) -> ImageGenerationResult:
    """
    Parse a native image response.

    An ``inlineData`` part is success. A text-only response means the call
    worked but the model declined; that is a SafetyFilterWarning carrying the
    model's text, not a hard error.
    """
    if not isinstance(response, dict):
        raise _malformed("Native image response is not an object", response)

    for part in _native_parts(response):
        inline = part.get("inlineData")
        if inline and inline.get("data"):
            mime_type = inline.get("mimeType") or "image/png"
            return ImageGenerationResult(data_url=f"data:{mime_type};base64,{inline['data']}")

    text = _native_text(response)
    if text:
        raise SafetyFilterWarning(SAFETY_DECLINE_MESSAGE, model_text=text)

    raise _malformed("Image generation failed. The model did not return an image.", response)


def parse_native_text_response(response: dict[str, Any]) -> str:
    text = _native_text(response) if isinstance(response, dict) else None
    if not text:
        raise _malformed("Text generation failed. The model did not return text.", response)
    return text


def parse_native_json_response(response: dict[str, Any], expected_keys: Optional[list[str]] = None) -> Any:
    """
    Parse structured JSON out of a native text response.

    Fenced ```json blocks are unwrapped first; otherwise the outermost object
    or array in the text is used.
    """
    text = parse_native_text_response(response).strip()
    match = _JSON_BLOCK.search(text)
    json_text = (match.group(1) or match.group(2)) if match else text
    try:
        parsed = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Failed to parse JSON response: {e}", raw=text) from e

    for key in expected_keys or []:
        if not isinstance(parsed, dict) or key not in parsed:
            raise MalformedResponseError(f"Failed to parse JSON response: Missing required key: {key}", raw=text)
    return parsed


# Webhook parsers


def parse_webhook_image_response(response: dict[str, Any]) -> ImageGenerationResult:
    """
    Parse a webhook image response.

    The ``images`` array is the success discriminant: some failure paths omit
    an explicit error. Base64 entries become JPEG data URLs; public URLs (from
    the async models) pass through.
    """
    if not isinstance(response, dict):
        raise _malformed("Image generation response is not an object", response)

    images = response.get("images")
    if isinstance(images, list) and images:
        first = images[0]
        if not isinstance(first, str) or not first:
            raise _malformed("Image generation response contained invalid image data", response)
        if is_public_url(first):
            return ImageGenerationResult(data_url=first, urls=_string_list(images))
        return ImageGenerationResult(data_url=f"data:image/jpeg;base64,{first}")

    error = _error_field(response, ("error", "message", "Error"))
    if error:
        raise create_api_error(error, details={"response": sanitize_for_logging(response)})

    raise _malformed("Image generation response did not contain a valid images array", response)


def parse_webhook_submit_response(response: dict[str, Any]) -> SubmittedJob:
    """Parse the acknowledgement of an async submission (video or async image)."""
    if not isinstance(response, dict):
        raise _malformed("Submission response is not an object", response)

    error = _error_field(response)
    if error:
        raise create_api_error(
            f"Generation initiation failed: {error}", details={"response": sanitize_for_logging(response)}
        )

    request_id = response.get("request_id")
    if not request_id or not isinstance(request_id, str):
        raise _malformed("Generation response did not contain a request_id", response)
    return SubmittedJob(request_id=request_id)


def parse_webhook_status_response(response: dict[str, Any], output_field: str = "videos") -> JobStatusResult:
    """
    Parse one status poll.

    ``status`` is the primary discriminant and the output array confirms
    completion. Error fields and any status other than generating/completed
    raise. A payload with neither status nor outputs counts as still generating.
    """
    if not isinstance(response, dict):
        raise _malformed("Status response is not an object", response)

    error = _error_field(response)
    if error:
        raise create_api_error(f"Generation failed: {error}", details={"response": sanitize_for_logging(response)})

    status = response.get("status")
    outputs = _string_list(response.get(output_field))

    if status == JobStatus.GENERATING.value:
        return JobStatusResult(status=JobStatus.GENERATING)
    if outputs:
        return JobStatusResult(status=JobStatus.COMPLETED, output_urls=outputs)
    if status == JobStatus.COMPLETED.value:
        raise _malformed(f"Status reported completed without a valid '{output_field}' array", response)
    if status:
        raise create_api_error(
            f"Generation failed with status: {status}", details={"response": sanitize_for_logging(response)}
        )
    return JobStatusResult(status=JobStatus.GENERATING)


def parse_upload_response(response: dict[str, Any]) -> UploadResult:
    if not isinstance(response, dict):
        raise _malformed("Upload response is not an object", response)

    error = _error_field(response, ("error",))
    if error:
        raise create_api_error(f"Upload failed: {error}")

    public_url = response.get("image_url") or response.get("file_url")
    if not public_url or not isinstance(public_url, str):
        raise _malformed("Upload response did not contain a valid URL", response)
    return UploadResult(public_url=public_url)


def parse_stitcher_response(response: dict[str, Any]) -> StitcherResult:
    if not isinstance(response, dict):
        raise _malformed("Stitcher response is not an object", response)

    video_url = response.get("url") or response.get("stitched_video_url")
    if not video_url or not isinstance(video_url, str):
        raise _malformed("Stitching service did not return a valid video URL", response)
    return StitcherResult(video_url=video_url)


def parse_upscaler_response(response: dict[str, Any]) -> UpscaleResult:
    """
    Parse an upscaler response.

    Accepted shapes, in order: ``{"images": [url, ...]}``,
    ``{"image": {"url": url}}`` and ``{"url": url}``.
    """
    if not isinstance(response, dict):
        raise _malformed("Upscaler response is not an object", response)

    error = _error_field(response)
    if error:
        raise create_api_error(f"Upscaling failed: {error}")

    images = _string_list(response.get("images"))
    image = response.get("image")
    if images:
        image_url = images[0]
    elif isinstance(image, dict) and isinstance(image.get("url"), str) and image["url"]:
        image_url = image["url"]
    elif isinstance(response.get("url"), str) and response["url"]:
        image_url = response["url"]
    else:
        raise _malformed("Upscaler did not return a valid image URL.", response)
    return UpscaleResult(image_url=image_url)


def adapt_image_generation_response(raw: Any, model: str) -> ImageGenerationResult:
    """Route an image response to the parser for its model family."""
    if is_native_model(model):
        return parse_native_image_response(raw)
    return parse_webhook_image_response(raw)


# Error handling


def normalize_error(error: BaseException) -> NormalizedApiError:
    """NormalizedApiError for any exception; non-ApiErrors are not user facing."""
    if isinstance(error, ApiError):
        return error.normalized()
    message = str(error) or error.__class__.__name__
    return NormalizedApiError(
        message=message,
        is_user_facing=False,
        is_safety_filter=is_safety_filter_message(message),
        is_quota_exceeded=is_quota_exceeded_message(message),
        code=ErrorCode.INTERNAL_ERROR,
        retryable=False,
    )


def _embedded_api_message(message: str) -> Optional[str]:
    match = _EMBEDDED_JSON.search(message)
    if not match:
        return None
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    nested = payload.get("error")
    api_message = (nested.get("message") if isinstance(nested, dict) else None) or payload.get("Error")
    return str(api_message or "An unknown API error occurred.")


def describe_error(error: BaseException, task_context: Optional[str] = None) -> str:
    """
    User-facing one-line description of a failed operation.

    Embedded JSON API errors are reduced to their message, quota and safety
    failures get fixed actionable wording, network failures a connection hint.
    """
    prefix = f"Failed on {task_context}" if task_context else "Operation failed"
    message = getattr(error, "message", None) or str(error) or error.__class__.__name__

    api_message = _embedded_api_message(message)
    if api_message is not None:
        return f"{prefix}: {api_message.split('. For more information')[0]}"

    normalized = normalize_error(error)
    if normalized.is_quota_exceeded:
        return f"{prefix}: Your API key has exceeded its quota."
    if normalized.is_safety_filter and not isinstance(error, SafetyFilterWarning):
        return f"{prefix}: Generation failed due to safety filters."
    if isinstance(error, TransientNetworkError):
        return f"{prefix}: Network error. Please check your connection."
    if isinstance(error, GenerationTimeoutError) and error.request_id:
        return f"{prefix}: {message} The job can be resumed."
    return f"{prefix}: {message}"
