"""Automation webhook client."""

from dataclasses import dataclass

import httpx

from homelife.domain.errors import ExternalDependencyError
from homelife.services.notifications import WebhookClient

USER_AGENT = "HomeLife-API/1.0"


@dataclass
class HttpxWebhookClient(WebhookClient):
    """HTTPX-backed client that posts notification events as JSON."""

    http_client: httpx.AsyncClient
    timeout: float = 10.0

    @classmethod
    def create(cls, timeout: float = 10.0) -> "HttpxWebhookClient":
        """Create a webhook client with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(headers={"User-Agent": USER_AGENT}),
            timeout=timeout,
        )

    async def post_json(self, url: str, payload: dict[str, object]) -> None:
        """POST the payload and raise on transport errors or non-2xx responses."""
        try:
            response = await self.http_client.post(
                url, json=payload, timeout=self.timeout
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ExternalDependencyError(f"Webhook request failed: {exc}") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
