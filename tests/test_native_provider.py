"""Tests for the native SDK image provider."""

import asyncio
from types import SimpleNamespace

import httpx
import pytest
from google.genai import errors as genai_errors

from creativestudio.models.errors import (
    GenerationTimeoutError,
    HttpRejectionError,
    InvalidInputError,
    QuotaExceededError,
    SafetyFilterWarning,
    TransientNetworkError,
)
from creativestudio.providers.native_provider import (
    NativeImageProvider,
    build_client,
    call_native,
    response_to_dict,
)


def sdk_response(*parts):
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


def image_part(data=b"PNGBYTES", mime_type="image/png"):
    return SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type), text=None)


def text_part(text):
    return SimpleNamespace(inline_data=None, text=text)


@pytest.fixture
def provider(mock_genai_client):
    return NativeImageProvider(client=mock_genai_client, retry_delay=0, timeout_seconds=5.0)


def test_response_to_dict_encodes_image_bytes():
    """Test that inline bytes are base64-encoded for the adapter."""
    raw = response_to_dict(sdk_response(text_part("Here"), image_part(b"abc")))

    parts = raw["candidates"][0]["content"]["parts"]
    assert parts[0] == {"text": "Here"}
    assert parts[1] == {"inlineData": {"data": "YWJj", "mimeType": "image/png"}}
    assert raw["text"] == "Here"


def test_response_to_dict_empty():
    assert response_to_dict(SimpleNamespace(candidates=None)) == {"candidates": [], "text": None}


def test_build_client_requires_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)

    with pytest.raises(ValueError, match="API key is required"):
        build_client()


@pytest.mark.asyncio
async def test_generate_returns_data_url(provider, mock_genai_client, make_task, image_blob):
    """Test successful native generation."""
    mock_genai_client.aio.models.generate_content.return_value = sdk_response(image_part(b"abc"))

    result = await provider.generate(make_task(images=(image_blob,), aspect_ratio="16:9"))

    assert result.data_url == "data:image/png;base64,YWJj"
    kwargs = mock_genai_client.aio.models.generate_content.await_args.kwargs
    assert kwargs["model"] == "gemini-2.5-flash-image"
    assert kwargs["config"].image_config.aspect_ratio == "16:9"
    parts = kwargs["contents"][0].parts
    assert parts[0].inline_data.data == b"hello"
    assert parts[-1].text == "prompt 0-0"


@pytest.mark.asyncio
async def test_text_only_is_warning(provider, mock_genai_client, make_task, image_blob):
    mock_genai_client.aio.models.generate_content.return_value = sdk_response(text_part("I can't edit this."))

    with pytest.raises(SafetyFilterWarning) as exc_info:
        await provider.generate(make_task(images=(image_blob,)))

    assert exc_info.value.model_text == "I can't edit this."


@pytest.mark.asyncio
async def test_requires_inline_images(provider, make_task):
    with pytest.raises(InvalidInputError):
        await provider.generate(make_task(images=()))


def test_auto_aspect_ratio_has_no_image_config():
    assert NativeImageProvider.build_config("auto").image_config is None


@pytest.mark.asyncio
async def test_network_errors_retried(provider, mock_genai_client, make_task, image_blob):
    mock_genai_client.aio.models.generate_content.side_effect = [
        httpx.ConnectError("reset"),
        sdk_response(image_part()),
    ]

    result = await provider.generate(make_task(images=(image_blob,)))

    assert result.data_url.startswith("data:image/png;base64,")
    assert mock_genai_client.aio.models.generate_content.await_count == 2


@pytest.mark.asyncio
async def test_quota_error_not_retried(provider, mock_genai_client, make_task, image_blob):
    """Test that RESOURCE_EXHAUSTED maps to a quota error without retrying."""
    mock_genai_client.aio.models.generate_content.side_effect = genai_errors.ClientError(
        429, {"error": {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}}
    )

    with pytest.raises(QuotaExceededError):
        await provider.generate(make_task(images=(image_blob,)))
    assert mock_genai_client.aio.models.generate_content.await_count == 1


@pytest.mark.asyncio
async def test_call_native_maps_errors():
    async def rejected():
        raise genai_errors.ClientError(400, {"error": {"code": 400, "message": "Bad image", "status": "INVALID_ARGUMENT"}})

    async def unreachable():
        raise httpx.ConnectError("down")

    with pytest.raises(HttpRejectionError) as exc_info:
        await call_native(rejected)
    assert exc_info.value.status_code == 400
    assert "Bad image" in exc_info.value.message

    with pytest.raises(TransientNetworkError):
        await call_native(unreachable)


@pytest.mark.asyncio
async def test_timeout(mock_genai_client, make_task, image_blob):
    async def slow(**kwargs):
        await asyncio.sleep(1)

    mock_genai_client.aio.models.generate_content.side_effect = slow
    provider = NativeImageProvider(client=mock_genai_client, retry_delay=0, timeout_seconds=0.01)

    with pytest.raises(GenerationTimeoutError):
        await provider.generate(make_task(images=(image_blob,)))
