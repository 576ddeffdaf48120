"""Photo download client."""

from dataclasses import dataclass

import httpx

from clubcam.errors import StorageError
from clubcam.services.photos import PhotoDownloadClient


@dataclass
class HttpxPhotoDownloadClient(PhotoDownloadClient):
    """Downloads public photo URLs using httpx."""

    http_client: httpx.AsyncClient
    timeout_seconds: float = 20.0

    @classmethod
    def create(cls, timeout_seconds: float = 20.0) -> "HttpxPhotoDownloadClient":
        """Create a download client with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(), timeout_seconds=timeout_seconds)

    async def download(self, url: str) -> bytes:
        """Download the bytes served at a public URL."""
        try:
            response = await self.http_client.get(url, timeout=self.timeout_seconds)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise StorageError(f"Failed to download {url}") from exc
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
