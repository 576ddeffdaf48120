"""Supabase storage bucket for photo blobs."""

from dataclasses import dataclass

import httpx
from storage3.utils import StorageException
from supabase import AsyncClient

from clubcam.errors import StorageError
from clubcam.services.photos import PhotoStorage


@dataclass
class SupabasePhotoStorage(PhotoStorage):
    """Uploads JPEG blobs into a Supabase storage bucket."""

    client: AsyncClient
    bucket: str

    async def upload_photo_blob(self, path: str, data: bytes) -> None:
        """Upload bytes under the path."""
        try:
            await self.client.storage.from_(self.bucket).upload(
                path=path,
                file=data,
                file_options={"content-type": "image/jpeg"},
            )
        except (StorageException, httpx.HTTPError) as exc:
            raise StorageError(f"Storage upload failed for {path}") from exc
