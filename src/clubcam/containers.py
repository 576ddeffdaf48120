"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import AsyncClient, acreate_client

from clubcam.adapters.last_known_location import LastKnownLocation
from clubcam.adapters.photo_download_client import HttpxPhotoDownloadClient
from clubcam.adapters.storage_urls import StorageUrlResolver
from clubcam.adapters.supabase_auth_gateway import SupabaseAuthGateway
from clubcam.adapters.supabase_event_repository import SupabaseEventRepository
from clubcam.adapters.supabase_participant_repository import (
    SupabaseParticipantRepository,
)
from clubcam.adapters.supabase_photo_repository import SupabasePhotoRepository
from clubcam.adapters.supabase_photo_storage import SupabasePhotoStorage
from clubcam.app_logging import configure_logging
from clubcam.config import Settings, load_settings
from clubcam.domain.models import Coordinates
from clubcam.services.auth import AuthService
from clubcam.services.events import EventService
from clubcam.services.photos import PhotoService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    supabase_client: AsyncClient
    url_resolver: StorageUrlResolver
    location: LastKnownLocation
    auth_service: AuthService
    event_service: EventService
    photo_service: PhotoService
    close_resources: Callable[[], Awaitable[None]]


def fallback_location(settings: Settings) -> Coordinates | None:
    """Return the configured fallback location, if both coordinates are set."""
    if settings.fallback_latitude is None or settings.fallback_longitude is None:
        return None
    return Coordinates(
        latitude=settings.fallback_latitude,
        longitude=settings.fallback_longitude,
    )


async def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    configure_logging()
    resolved_settings = settings or load_settings()
    supabase_client = await acreate_client(
        resolved_settings.supabase_url, resolved_settings.supabase_anon_key
    )
    return assemble_container(resolved_settings, supabase_client)


def assemble_container(
    settings: Settings, supabase_client: AsyncClient
) -> AppContainer:
    """Wire adapters and services around an existing Supabase client."""
    url_resolver = StorageUrlResolver(
        base_url=settings.supabase_url, bucket=settings.storage_bucket
    )
    auth_gateway = SupabaseAuthGateway(supabase_client)
    location = LastKnownLocation()
    download_client = HttpxPhotoDownloadClient.create(
        timeout_seconds=settings.download_timeout_seconds
    )
    event_service = EventService(
        auth=auth_gateway,
        events=SupabaseEventRepository(supabase_client),
        participants=SupabaseParticipantRepository(supabase_client),
        location_provider=location,
        default_radius_km=settings.nearby_radius_km,
        max_radius_km=settings.max_radius_km,
        fallback_location=fallback_location(settings),
    )
    photo_service = PhotoService(
        auth=auth_gateway,
        storage=SupabasePhotoStorage(supabase_client, settings.storage_bucket),
        repository=SupabasePhotoRepository(supabase_client, url_resolver),
        download_client=download_client,
    )

    async def close_resources() -> None:
        await download_client.close()

    return AppContainer(
        settings=settings,
        supabase_client=supabase_client,
        url_resolver=url_resolver,
        location=location,
        auth_service=AuthService(auth_gateway),
        event_service=event_service,
        photo_service=photo_service,
        close_resources=close_resources,
    )
