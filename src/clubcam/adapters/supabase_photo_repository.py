"""Supabase-backed photo repository."""

import logging
from dataclasses import dataclass, replace

from postgrest.types import ReturnMethod
from supabase import AsyncClient

from clubcam.adapters.response_decoder import PhotoRow, decode_list, decode_one
from clubcam.adapters.storage_urls import StorageUrlResolver
from clubcam.adapters.supabase_errors import BACKEND_FAILURES
from clubcam.domain.photos import Photo
from clubcam.errors import DecodeError, EncodingError, ReadError, WriteError
from clubcam.services.photos import PhotoRepository

_logger = logging.getLogger(__name__)


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photo metadata persistence."""

    client: AsyncClient
    url_resolver: StorageUrlResolver

    async def insert_photo(self, photo: Photo) -> Photo:
        """Insert a photo row and return it with its public URL."""
        try:
            response = (
                await self.client.table("photos")
                .insert(
                    {
                        "id": photo.id,
                        "event_id": photo.event_id,
                        "user_id": photo.user_id,
                        "storage_path": photo.storage_path,
                        "caption": photo.caption,
                        "taken_at": photo.taken_at.isoformat(),
                        "latitude": photo.latitude,
                        "longitude": photo.longitude,
                        "created_at": photo.created_at.isoformat(),
                    },
                    returning=ReturnMethod.representation,
                )
                .execute()
            )
        except BACKEND_FAILURES as exc:
            raise WriteError("Failed to create photo metadata") from exc
        if not response.data:
            raise WriteError("No photo returned after insertion")
        try:
            stored = decode_one(response.data, PhotoRow).to_domain()
        except DecodeError:
            _logger.warning(
                "Could not decode inserted photo %s, using local copy", photo.id
            )
            stored = photo
        image_url = self.url_resolver.resolve(stored.storage_path)
        return replace(stored, image_url=image_url)

    async def photos_by_event(self, event_id: str) -> list[Photo]:
        """Return an event's photos ordered by ``taken_at`` descending."""
        try:
            response = (
                await self.client.table("photos")
                .select("*")
                .eq("event_id", event_id)
                .order("taken_at", desc=True)
                .execute()
            )
        except BACKEND_FAILURES as exc:
            raise ReadError(f"Failed to fetch photos for event {event_id}") from exc
        photos: list[Photo] = []
        for row in decode_list(response.data, PhotoRow):
            try:
                image_url = self.url_resolver.resolve(row.storage_path)
            except EncodingError:
                _logger.warning("Skipping photo %s with unusable path", row.id)
                continue
            photos.append(row.to_domain(image_url=image_url))
        return photos
