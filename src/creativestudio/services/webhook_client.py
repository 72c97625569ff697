"""HTTP client for webhook providers, with proxy routing, retry and timeout."""

import asyncio
import json
import logging
import os
from typing import Any

import httpx
from tenacity import AsyncRetrying

from creativestudio.config import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAY_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    DEV_SERVER_PORT,
    WEBHOOK_PROXY_PATH,
)
from creativestudio.models.errors import (
    GenerationTimeoutError,
    HttpRejectionError,
    MalformedResponseError,
    TransientNetworkError,
    create_api_error,
)
from creativestudio.services.retry_service import build_retry_config
from creativestudio.utils.logging_utils import sanitize_for_logging

logger = logging.getLogger(__name__)

TARGET_URL_HEADER = "X-Target-URL"
RESPONSE_TYPE_HEADER = "X-Response-Type"


def extract_error_message(body: Any, status_code: int) -> str:
    """Pick the provider's error text out of an error body."""
    fallback = f"Request failed with status {status_code}."
    if not isinstance(body, dict):
        return fallback
    error = body.get("error") or body.get("message") or body.get("Error")
    if isinstance(error, dict):
        # Google-style {"error": {"code", "message", "status"}} bodies keep the status token
        return json.dumps(body)
    return str(error) if error else fallback


class WebhookClient:
    """
    Client for webhook-based providers.

    Requests are sent through the same-origin proxy when one is configured and
    the UI is not served from the dev server port; the real destination then
    travels in the X-Target-URL header. Transport failures are retried with
    exponential backoff, HTTP error responses never are, and a per-attempt
    timeout raises GenerationTimeoutError carrying the URL, payload and attempt
    count.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        proxy_url: str | None = None,
        served_port: str | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY_SECONDS,
        timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
    ):
        """
        Initialize webhook client.

        Args:
            http_client: Shared httpx client (created and owned here when omitted)
            proxy_url: Origin serving the webhook proxy (defaults to STUDIO_WEBHOOK_PROXY_URL env var)
            served_port: Port the UI is served from (defaults to STUDIO_SERVED_PORT env var)
            max_retries: Total attempts for transport failures
            retry_delay: Base backoff delay in seconds
            timeout_seconds: Per-attempt timeout, None to disable
        """
        self.proxy_url = proxy_url or os.getenv("STUDIO_WEBHOOK_PROXY_URL")
        self.served_port = served_port or os.getenv("STUDIO_SERVED_PORT")
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout_seconds = timeout_seconds
        self._owns_client = http_client is None
        # Timeouts are enforced per attempt below, not by httpx
        self._client = http_client or httpx.AsyncClient(timeout=None)

    async def __aenter__(self) -> "WebhookClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def uses_proxy(self) -> bool:
        """True when requests should be routed through the webhook proxy."""
        if not self.proxy_url:
            return False
        return str(self.served_port) != DEV_SERVER_PORT

    def _route(self, url: str, binary: bool = False) -> tuple[str, dict[str, str]]:
        headers = {"Content-Type": "application/json"}
        if not self.uses_proxy():
            return url, headers
        headers[TARGET_URL_HEADER] = url
        if binary:
            headers[RESPONSE_TYPE_HEADER] = "binary"
        return f"{self.proxy_url.rstrip('/')}{WEBHOOK_PROXY_PATH}", headers

    async def call(
        self,
        url: str,
        payload: Any = None,
        *,
        method: str = "POST",
        max_retries: int | None = None,
        retry_delay: float | None = None,
        timeout_seconds: float | None = None,
    ) -> Any:
        """
        Send a JSON request and return the parsed JSON body.

        Args:
            url: Real webhook URL
            payload: JSON payload (ignored for GET)
            method: HTTP method
            max_retries: Override of the total attempt count
            retry_delay: Override of the base backoff delay (seconds)
            timeout_seconds: Override of the per-attempt timeout

        Returns:
            Parsed JSON response

        Raises:
            TransientNetworkError: Transport failure on every attempt
            GenerationTimeoutError: An attempt exceeded the timeout
            HttpRejectionError: The provider answered 4xx/5xx (QuotaExceededError for quota)
            MalformedResponseError: The body was not valid JSON
        """
        request_url, headers = self._route(url)
        response = await self._send(
            method, request_url, url, headers, payload, max_retries, retry_delay, timeout_seconds
        )
        try:
            return response.json()
        except ValueError as e:
            raw = response.text[:1000]
            logger.error(
                f"❌ [WebhookClient] Non-JSON response from {url}: "
                f"{json.dumps(sanitize_for_logging({'status': response.status_code, 'raw': raw}))}"
            )
            raise MalformedResponseError(
                f"Failed to parse API response: {response.reason_phrase or e}",
                raw=raw,
                original_exception=e,
            ) from e

    async def call_binary(
        self,
        url: str,
        payload: Any = None,
        *,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        timeout_seconds: float | None = None,
    ) -> httpx.Response:
        """POST a JSON payload and return the raw response, for endpoints that may answer with a file."""
        request_url, headers = self._route(url, binary=True)
        return await self._send(
            "POST", request_url, url, headers, payload, max_retries, retry_delay, timeout_seconds
        )

    async def download(self, url: str, *, timeout_seconds: float | None = None) -> bytes:
        """GET a public file URL directly (never proxied)."""
        response = await self._send("GET", url, url, {}, None, None, None, timeout_seconds)
        return response.content

    async def _send(
        self,
        method: str,
        request_url: str,
        target_url: str,
        headers: dict[str, str],
        payload: Any,
        max_retries: int | None,
        retry_delay: float | None,
        timeout_seconds: float | None,
    ) -> httpx.Response:
        config = build_retry_config(
            max_retries if max_retries is not None else self.max_retries,
            retry_delay if retry_delay is not None else self.retry_delay,
        )
        timeout = timeout_seconds if timeout_seconds is not None else self.timeout_seconds

        async for attempt in AsyncRetrying(**config):
            with attempt:
                return await self._attempt(
                    method,
                    request_url,
                    target_url,
                    headers,
                    payload,
                    timeout,
                    attempt.retry_state.attempt_number,
                )

    async def _attempt(
        self,
        method: str,
        request_url: str,
        target_url: str,
        headers: dict[str, str],
        payload: Any,
        timeout: float | None,
        attempt_number: int,
    ) -> httpx.Response:
        body = payload if method.upper() != "GET" else None
        try:
            response = await asyncio.wait_for(
                self._client.request(method, request_url, headers=headers, json=body),
                timeout=timeout,
            )
        except (httpx.ConnectTimeout, httpx.PoolTimeout) as e:
            # The request never left the client.
            raise TransientNetworkError(
                f"Could not connect to {target_url}: {e}",
                details={"url": target_url, "attempt": attempt_number},
                original_exception=e,
            ) from e
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning(f"⏱️ [WebhookClient] {target_url} timed out on attempt {attempt_number}")
            raise GenerationTimeoutError(
                f"Request to {target_url} timed out after {timeout}s",
                url=target_url,
                payload=payload,
                attempts_made=attempt_number,
                original_exception=e,
            ) from e
        except httpx.TransportError as e:
            raise TransientNetworkError(
                f"Network error calling {target_url}: {e}",
                details={"url": target_url, "attempt": attempt_number},
                original_exception=e,
            ) from e

        if response.is_error:
            raise self._rejection(response, target_url)
        return response

    @staticmethod
    def _rejection(response: httpx.Response, target_url: str) -> HttpRejectionError:
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text[:1000] or None
        message = extract_error_message(body, response.status_code)
        logger.error(f"❌ [WebhookClient] {target_url} rejected with {response.status_code}: {message}")
        return create_api_error(
            message,
            error_cls=HttpRejectionError,
            status_code=response.status_code,
            body=body,
        )
