"""Photo upload and browsing use cases."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from clubcam.domain.models import Coordinates
from clubcam.domain.photos import Photo
from clubcam.errors import InvalidInputError, StorageError, WriteError
from clubcam.services.auth import AuthGateway

_logger = logging.getLogger(__name__)


class PhotoStorage(Protocol):
    """Object storage for photo blobs."""

    async def upload_photo_blob(self, path: str, data: bytes) -> None:
        """Store the bytes under the path."""


class PhotoRepository(Protocol):
    """Backend access for photo records."""

    async def insert_photo(self, photo: Photo) -> Photo:
        """Insert a photo record and return it with its public URL."""

    async def photos_by_event(self, event_id: str) -> list[Photo]:
        """Return an event's photos, newest first, with public URLs."""


class PhotoDownloadClient(Protocol):
    """Fetches photo bytes from a public URL."""

    async def download(self, url: str) -> bytes:
        """Return the bytes served at the URL."""


def photo_storage_path(event_id: str, photo_id: str) -> str:
    """Return the storage key for a photo of an event."""
    return f"photos/{event_id}/{photo_id}.jpg"


def _new_photo_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class PhotoService:
    """Application service for event photos."""

    auth: AuthGateway
    storage: PhotoStorage
    repository: PhotoRepository
    download_client: PhotoDownloadClient
    id_factory: Callable[[], str] = field(default=_new_photo_id)
    clock: Callable[[], datetime] = field(default=_utcnow)

    async def upload_photo(
        self,
        event_id: str,
        image: bytes,
        caption: str | None = None,
        location: Coordinates | None = None,
    ) -> Photo:
        """Upload a JPEG for an event and record it.

        The blob is stored before the record is inserted. When the insert fails
        the blob stays in storage unreferenced; the failure is logged with the
        path and re-raised.
        """
        if not event_id:
            raise InvalidInputError("Event id is required")
        if not image:
            raise InvalidInputError("Photo data is empty")
        user_id = await self.auth.current_user_id()
        photo_id = self.id_factory()
        path = photo_storage_path(event_id, photo_id)

        _logger.info("Uploading photo to storage path: %s", path)
        await self.storage.upload_photo_blob(path, image)

        now = self.clock()
        photo = Photo(
            id=photo_id,
            event_id=event_id,
            user_id=user_id,
            storage_path=path,
            caption=caption,
            taken_at=now,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            created_at=now,
        )
        try:
            stored = await self.repository.insert_photo(photo)
        except WriteError:
            _logger.exception("Photo record insert failed, orphaned blob: %s", path)
            raise
        return replace(stored, image=image)

    async def list_photos(self, event_id: str) -> list[Photo]:
        """Return an event's photos, newest first."""
        photos = await self.repository.photos_by_event(event_id)
        _logger.info("Fetched %s photos for event %s", len(photos), event_id)
        return photos

    async def load_image(self, photo: Photo) -> Photo:
        """Return the photo with its image bytes cached."""
        if photo.image is not None:
            return photo
        if not photo.image_url:
            raise StorageError(f"Photo {photo.id} has no public URL")
        data = await self.download_client.download(photo.image_url)
        return replace(photo, image=data)
