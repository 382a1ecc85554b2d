"""Chat-completion client for the hosted LLM gateway.

Talks to an OpenAI-compatible ``/chat/completions`` endpoint with bearer
authentication. Non-streaming only; no retries are performed here.
"""

import logging
from typing import Any, Optional

import httpx

from mindfulspace.config import Settings
from mindfulspace.errors import (
    ConfigurationError,
    GatewayFailureError,
    RateLimitedError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)


class GatewayClient:
    """Async client for ``POST {gateway_url}/chat/completions``.

    Lifecycle:
        client = GatewayClient(settings)
        await client.initialize()   # call once at startup
        ...
        await client.close()        # call once at shutdown
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self._settings.gateway_url.rstrip("/"),
            timeout=self._settings.gateway_timeout_seconds,
            transport=self._transport,
        )
        logger.info(
            "GatewayClient initialized (url=%s, model=%s)",
            self._settings.gateway_url,
            self._settings.gateway_model,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
        logger.info("GatewayClient closed")

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """Send a conversation and return the generated assistant text.

        Args:
            messages: Role-tagged messages, system instruction first.

        Returns:
            Content of the first choice, verbatim.

        Raises:
            ConfigurationError: No API key is configured.
            RateLimitedError: The gateway answered 429.
            ServiceUnavailableError: The gateway answered 402.
            GatewayFailureError: Any other non-2xx status, a malformed body,
                or a transport failure such as a timeout.
        """
        if not self._settings.gateway_configured:
            raise ConfigurationError()
        if self._client is None:
            await self.initialize()

        try:
            response = await self._client.post(
                "/chat/completions",
                headers={"Authorization": f"Bearer {self._settings.gateway_api_key}"},
                json={
                    "model": self._settings.gateway_model,
                    "messages": messages,
                    "stream": False,
                },
            )
        except httpx.TransportError as exc:
            logger.error("AI Gateway request failed: %r", exc)
            raise GatewayFailureError("AI Gateway request failed") from exc

        if response.is_error:
            logger.error(
                "AI Gateway error %d: %s", response.status_code, response.text[:200]
            )
            if response.status_code == 429:
                raise RateLimitedError()
            if response.status_code == 402:
                raise ServiceUnavailableError()
            raise GatewayFailureError(upstream_status=response.status_code)

        return _extract_content(response)


def _extract_content(response: httpx.Response) -> str:
    try:
        data: dict[str, Any] = response.json()
        content = data["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        logger.error("Malformed AI Gateway response: %s", response.text[:200])
        raise GatewayFailureError("AI Gateway returned a malformed response") from exc

    if not isinstance(content, str):
        raise GatewayFailureError("AI Gateway returned a malformed response")
    return content
