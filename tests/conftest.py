"""Shared pytest fixtures for creativestudio tests."""

import json

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock

from creativestudio.config import StudioConfig
from creativestudio.models.requests import GenerationTask, ImageBlob
from creativestudio.models.results import ResultKey
from creativestudio.services.webhook_client import WebhookClient


class RecordingTransport:
    """
    httpx transport answering from a queue of canned responses.

    Each queued item is a dict/list (JSON 200), an httpx.Response, an
    exception instance (raised) or a callable taking the request.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def add(self, *responses) -> "RecordingTransport":
        self.responses.extend(responses)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request to {request.url}")
        item = self.responses.pop(0)
        if callable(item) and not isinstance(item, httpx.Response):
            item = item(request)
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)

    def json_bodies(self) -> list:
        return [json.loads(request.content) if request.content else None for request in self.requests]


@pytest.fixture
def studio_config():
    """Configuration with a fixed base URL, no proxy and no delays."""
    return StudioConfig(
        webhook_base_url="https://hooks.example.com/webhook",
        gemini_api_key="test-key",
        proxy_url=None,
        served_port=None,
        max_retries=3,
        retry_delay=0,
        timeout_seconds=5.0,
        poll_interval_seconds=0,
        max_poll_attempts=3,
    )


@pytest.fixture
def transport():
    """Empty recording transport; tests queue the responses they expect."""
    return RecordingTransport()


@pytest.fixture
def webhook_client(transport):
    """WebhookClient sending through the recording transport, without backoff delays."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    return WebhookClient(http_client=http_client, max_retries=3, retry_delay=0, timeout_seconds=5.0)


@pytest.fixture
def image_blob():
    """Small inline JPEG blob."""
    return ImageBlob(base64="aGVsbG8=", mime_type="image/jpeg")


@pytest.fixture
def make_task():
    """Factory for generation tasks bound to a key in batch '240101120000'."""

    def _make(variant: int = 0, source: int = 0, **overrides) -> GenerationTask:
        fields = {
            "prompt": f"prompt {source}-{variant}",
            "image_urls": ("https://cdn.example.com/input.jpg",),
            "filename": f"ABC1234_input_{source}_{variant}.jpg",
            "key": ResultKey(batch_timestamp="240101120000", source_index=source, variant_index=variant),
            "labels": {"hairstyle": f"Style {variant}"},
        }
        fields.update(overrides)
        return GenerationTask(**fields)

    return _make


@pytest.fixture
def mock_genai_client():
    """Mock google-genai client exposing aio.models.generate_content."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    return client


@pytest.fixture
def mock_firestore():
    """Fixture for mock Firestore database."""
    mock_db = MagicMock()
    mock_collection = MagicMock()
    mock_db.collection.return_value = mock_collection
    return mock_db, mock_collection
