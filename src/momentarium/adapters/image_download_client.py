"""Downloads image bytes from signed storage URLs."""

from dataclasses import dataclass

import httpx

from momentarium.services.curation import ImageDownloader


@dataclass
class HttpxImageDownloader(ImageDownloader):
    """Image downloader implemented with httpx."""

    http_client: httpx.AsyncClient

    @classmethod
    def create(cls) -> "HttpxImageDownloader":
        """Create a downloader with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(follow_redirects=True))

    async def download(self, url: str) -> bytes:
        """Fetch the object at ``url``."""
        response = await self.http_client.get(url, timeout=30)
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
