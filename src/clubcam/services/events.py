"""Event discovery and participation use cases."""

import logging
from dataclasses import dataclass
from typing import Protocol

from clubcam.domain.events import Event, EventDraft, FetchMode
from clubcam.domain.models import Coordinates
from clubcam.errors import (
    AlreadyJoinedError,
    InvalidInputError,
    LocationUnavailableError,
    WriteConflictError,
)
from clubcam.services.auth import AuthGateway

_logger = logging.getLogger(__name__)


class EventRepository(Protocol):
    """Backend access for events."""

    async def nearby_events(
        self, latitude: float, longitude: float, radius_km: float
    ) -> list[Event]:
        """Return events within the radius of a point."""

    async def events_by_ids(self, ids: set[str]) -> list[Event]:
        """Return the events with the given ids."""

    async def insert_event(self, draft: EventDraft, created_by: str) -> Event:
        """Create an event and return the stored record."""


class ParticipantRepository(Protocol):
    """Backend access for event participation rows."""

    async def insert_participant(self, event_id: str, user_id: str) -> None:
        """Record that a user joined an event."""

    async def has_participant(self, event_id: str, user_id: str) -> bool:
        """Return whether the user already joined the event."""

    async def joined_event_ids(self, user_id: str) -> set[str]:
        """Return ids of every event the user joined."""


class LocationProvider(Protocol):
    """Source of the device location."""

    def current_location(self) -> Coordinates | None:
        """Return the last known location, if any."""


@dataclass
class EventService:
    """Application service for listing, creating and joining events."""

    auth: AuthGateway
    events: EventRepository
    participants: ParticipantRepository
    location_provider: LocationProvider
    default_radius_km: float
    max_radius_km: float
    fallback_location: Coordinates | None = None

    async def fetch_events(
        self, mode: FetchMode | str, radius_km: float | None = None
    ) -> list[Event]:
        """Load either nearby or joined events."""
        try:
            resolved = FetchMode(mode)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown fetch mode: {mode!r}") from exc
        match resolved:
            case FetchMode.NEARBY:
                return await self.fetch_nearby(radius_km)
            case FetchMode.JOINED:
                return await self.fetch_joined()

    async def fetch_nearby(self, radius_km: float | None = None) -> list[Event]:
        """Load events around the current location."""
        radius = self._checked_radius(radius_km)
        location = self._resolve_location()
        events = await self.events.nearby_events(
            location.latitude, location.longitude, radius
        )
        _logger.info(
            "Nearby events: lat=%s lng=%s radius_km=%s results=%s",
            location.latitude,
            location.longitude,
            radius,
            len(events),
        )
        return events

    async def fetch_joined(self) -> list[Event]:
        """Load the events the signed-in user joined."""
        user_id = await self.auth.current_user_id()
        return await self._joined_events(user_id)

    async def join_event(self, event_id: str) -> list[Event]:
        """Join an event once and return the refreshed joined list."""
        user_id = await self.auth.current_user_id()
        if await self.participants.has_participant(event_id, user_id):
            raise AlreadyJoinedError("You've already joined this event")
        try:
            await self.participants.insert_participant(event_id, user_id)
        except WriteConflictError as exc:
            raise AlreadyJoinedError("You've already joined this event") from exc
        _logger.info("User %s joined event %s", user_id, event_id)
        return await self._joined_events(user_id)

    async def create_event(self, draft: EventDraft) -> Event:
        """Create an event owned by the signed-in user."""
        if not draft.name.strip():
            raise InvalidInputError("Event name is required")
        if draft.end_time < draft.start_time:
            raise InvalidInputError("Event cannot end before it starts")
        user_id = await self.auth.current_user_id()
        event = await self.events.insert_event(draft, created_by=user_id)
        _logger.info("Created event %s for user %s", event.id, user_id)
        return event

    @staticmethod
    def search(events: list[Event], query: str | None) -> list[Event]:
        """Filter events by name, description or location."""
        needle = (query or "").strip().casefold()
        if not needle:
            return list(events)
        return [
            event
            for event in events
            if needle in event.name.casefold()
            or needle in (event.description or "").casefold()
            or needle in event.location.casefold()
        ]

    async def _joined_events(self, user_id: str) -> list[Event]:
        event_ids = await self.participants.joined_event_ids(user_id)
        if not event_ids:
            return []
        return await self.events.events_by_ids(event_ids)

    def _resolve_location(self) -> Coordinates:
        location = self.location_provider.current_location()
        if location is not None:
            return location
        if self.fallback_location is not None:
            _logger.info("Using fallback location for nearby events")
            return self.fallback_location
        raise LocationUnavailableError(
            "Location not available. Please enable location services."
        )

    def _checked_radius(self, radius_km: float | None) -> float:
        radius = self.default_radius_km if radius_km is None else radius_km
        if not 0 < radius <= self.max_radius_km:
            raise InvalidInputError(
                f"Radius must be between 0 and {self.max_radius_km} km"
            )
        return radius
