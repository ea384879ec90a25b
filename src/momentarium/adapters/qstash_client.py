"""Upstash QStash publishing client."""

from dataclasses import dataclass

import httpx

from momentarium.services.queue import QueueClient


@dataclass
class HttpxQStashClient(QueueClient):
    """QStash client implemented with httpx."""

    token: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, token: str, base_url: str) -> "HttpxQStashClient":
        """Create a QStash client with a managed httpx session."""
        return cls(token=token, base_url=base_url, http_client=httpx.AsyncClient())

    async def publish_json(
        self,
        *,
        url: str,
        body: dict[str, object],
        headers: dict[str, str],
        retries: int,
    ) -> str:
        """Publish a JSON message that QStash will POST to ``url``."""
        request_headers = {
            "Authorization": f"Bearer {self.token}",
            "Upstash-Retries": str(retries),
        }
        for name, value in headers.items():
            request_headers[f"Upstash-Forward-{name}"] = value
        response = await self.http_client.post(
            f"{self.base_url.rstrip('/')}/v2/publish/{url}",
            json=body,
            headers=request_headers,
            timeout=10,
        )
        response.raise_for_status()
        message_id = response.json().get("messageId")
        if not message_id:
            raise RuntimeError("QStash response did not include a message id")
        return str(message_id)

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
