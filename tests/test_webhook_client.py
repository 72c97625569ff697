"""Tests for the webhook HTTP client."""

import asyncio

import httpx
import pytest

from creativestudio.models.errors import (
    GenerationTimeoutError,
    HttpRejectionError,
    MalformedResponseError,
    QuotaExceededError,
    TransientNetworkError,
)
from creativestudio.services.webhook_client import WebhookClient, extract_error_message

TARGET = "https://hooks.example.com/webhook/model"


def make_client(transport, **kwargs) -> WebhookClient:
    kwargs.setdefault("retry_delay", 0)
    kwargs.setdefault("timeout_seconds", 5.0)
    return WebhookClient(http_client=httpx.AsyncClient(transport=httpx.MockTransport(transport)), **kwargs)


class TestRouting:
    """Tests for proxy selection."""

    def test_no_proxy_without_proxy_url(self):
        client = WebhookClient(proxy_url=None, served_port="8080")
        client.proxy_url = None

        assert client.uses_proxy() is False

    def test_dev_server_port_skips_proxy(self):
        client = WebhookClient(proxy_url="https://studio.example.com", served_port="5173")

        assert client.uses_proxy() is False

    def test_proxy_used_on_other_ports(self):
        client = WebhookClient(proxy_url="https://studio.example.com", served_port="443")

        assert client.uses_proxy() is True

    @pytest.mark.asyncio
    async def test_proxied_request_carries_target_header(self, transport):
        """Test that proxied requests go to the proxy path with X-Target-URL."""
        transport.add({"ok": True})
        client = make_client(transport, proxy_url="https://studio.example.com/", served_port="443")

        await client.call(TARGET, {"prompt": "x"})

        request = transport.requests[0]
        assert str(request.url) == "https://studio.example.com/webhook-proxy"
        assert request.headers["X-Target-URL"] == TARGET
        assert "X-Response-Type" not in request.headers

    @pytest.mark.asyncio
    async def test_binary_request_header(self, transport):
        transport.add(httpx.Response(200, content=b"video", headers={"content-type": "video/mp4"}))
        client = make_client(transport, proxy_url="https://studio.example.com", served_port="443")

        response = await client.call_binary(TARGET, {"video_urls": []})

        assert response.content == b"video"
        assert transport.requests[0].headers["X-Response-Type"] == "binary"

    @pytest.mark.asyncio
    async def test_direct_request(self, transport):
        transport.add({"images": ["abc"]})
        client = make_client(transport)
        client.proxy_url = None

        result = await client.call(TARGET, {"prompt": "x"})

        assert result == {"images": ["abc"]}
        assert str(transport.requests[0].url) == TARGET
        assert "X-Target-URL" not in transport.requests[0].headers
        assert transport.json_bodies() == [{"prompt": "x"}]


class TestRetries:
    """Tests for retry and timeout behaviour."""

    @pytest.mark.asyncio
    async def test_transport_error_retried(self, transport):
        """Test that transport failures are retried until success."""
        request = httpx.Request("POST", TARGET)
        transport.add(httpx.ConnectError("refused", request=request), {"images": ["abc"]})
        client = make_client(transport, proxy_url=None)
        client.proxy_url = None

        result = await client.call(TARGET, {})

        assert result == {"images": ["abc"]}
        assert len(transport.requests) == 2

    @pytest.mark.asyncio
    async def test_transport_error_exhausts_attempts(self, transport):
        request = httpx.Request("POST", TARGET)
        transport.add(*(httpx.ConnectError("refused", request=request) for _ in range(3)))
        client = make_client(transport, max_retries=3)
        client.proxy_url = None

        with pytest.raises(TransientNetworkError):
            await client.call(TARGET, {})
        assert len(transport.requests) == 3

    @pytest.mark.asyncio
    async def test_http_rejection_not_retried(self, transport):
        """Test that a 500 is surfaced at once."""
        transport.add(httpx.Response(500, json={"error": "server exploded"}))
        client = make_client(transport)
        client.proxy_url = None

        with pytest.raises(HttpRejectionError) as exc_info:
            await client.call(TARGET, {})

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "server exploded"
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_quota_rejection(self, transport):
        """Test that 429 and RESOURCE_EXHAUSTED bodies are quota errors and not retried."""
        transport.add(
            httpx.Response(400, json={"error": {"code": 429, "message": "Quota", "status": "RESOURCE_EXHAUSTED"}})
        )
        client = make_client(transport)
        client.proxy_url = None

        with pytest.raises(QuotaExceededError) as exc_info:
            await client.call(TARGET, {})

        assert exc_info.value.is_quota_exceeded is True
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_timeout_carries_context(self, transport):
        """Test that a timeout is not retried and keeps URL, payload and attempt."""
        transport.add(httpx.ReadTimeout("slow", request=httpx.Request("POST", TARGET)))
        client = make_client(transport)
        client.proxy_url = None

        with pytest.raises(GenerationTimeoutError) as exc_info:
            await client.call(TARGET, {"prompt": "x"})

        error = exc_info.value
        assert error.url == TARGET
        assert error.payload == {"prompt": "x"}
        assert error.attempts_made == 1
        assert error.handle is None
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_connect_timeout_is_transient(self, transport):
        """Test that a connect timeout is retried as a network failure, not a request timeout."""
        request = httpx.Request("POST", TARGET)
        transport.add(httpx.ConnectTimeout("no route", request=request), {"ok": True})
        client = make_client(transport)
        client.proxy_url = None

        assert await client.call(TARGET, {}) == {"ok": True}
        assert len(transport.requests) == 2

    @pytest.mark.asyncio
    async def test_connect_timeout_exhausts_as_transient(self, transport):
        request = httpx.Request("POST", TARGET)
        transport.add(*(httpx.ConnectTimeout("no route", request=request) for _ in range(3)))
        client = make_client(transport, max_retries=3)
        client.proxy_url = None

        with pytest.raises(TransientNetworkError):
            await client.call(TARGET, {})

    @pytest.mark.asyncio
    async def test_wall_clock_timeout(self):
        """Test that the per-attempt timeout is enforced around the request."""

        async def handler(request):
            await asyncio.sleep(1)
            return httpx.Response(200, json={})

        client = WebhookClient(
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            retry_delay=0,
            timeout_seconds=0.01,
        )
        client.proxy_url = None

        with pytest.raises(GenerationTimeoutError):
            await client.call(TARGET, {})


class TestBodies:
    @pytest.mark.asyncio
    async def test_non_json_body_is_malformed(self, transport):
        transport.add(httpx.Response(200, text="<html>oops</html>"))
        client = make_client(transport)
        client.proxy_url = None

        with pytest.raises(MalformedResponseError) as exc_info:
            await client.call(TARGET, {})

        assert exc_info.value.raw == "<html>oops</html>"

    @pytest.mark.asyncio
    async def test_get_sends_no_body(self, transport):
        transport.add({"status": "ok"})
        client = make_client(transport)
        client.proxy_url = None

        await client.call(TARGET, {"ignored": True}, method="GET")

        assert transport.requests[0].method == "GET"
        assert transport.requests[0].content == b""

    @pytest.mark.asyncio
    async def test_download_bypasses_proxy(self, transport):
        transport.add(httpx.Response(200, content=b"mp4"))
        client = make_client(transport, proxy_url="https://studio.example.com", served_port="443")

        assert await client.download("https://cdn.example.com/out.mp4") == b"mp4"
        assert str(transport.requests[0].url) == "https://cdn.example.com/out.mp4"

    def test_extract_error_message(self):
        assert extract_error_message({"message": "nope"}, 400) == "nope"
        assert extract_error_message("text", 502) == "Request failed with status 502."
        assert "RESOURCE_EXHAUSTED" in extract_error_message({"error": {"status": "RESOURCE_EXHAUSTED"}}, 400)
