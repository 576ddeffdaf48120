"""Supabase-backed event repository."""

from dataclasses import dataclass

from postgrest.types import ReturnMethod
from supabase import AsyncClient

from clubcam.adapters.response_decoder import EventRow, decode_list, decode_one
from clubcam.adapters.supabase_errors import BACKEND_FAILURES
from clubcam.domain.events import Event, EventDraft
from clubcam.errors import DecodeError, ReadError, WriteError
from clubcam.services.events import EventRepository


@dataclass
class SupabaseEventRepository(EventRepository):
    """Supabase implementation for event queries and inserts."""

    client: AsyncClient

    async def nearby_events(
        self, latitude: float, longitude: float, radius_km: float
    ) -> list[Event]:
        """Call the ``nearby_events`` RPC."""
        try:
            response = await self.client.rpc(
                "nearby_events",
                {"lat": latitude, "lng": longitude, "radius_km": radius_km},
            ).execute()
        except BACKEND_FAILURES as exc:
            raise ReadError("nearby_events RPC failed") from exc
        return [row.to_domain() for row in decode_list(response.data, EventRow)]

    async def events_by_ids(self, ids: set[str]) -> list[Event]:
        """Return events for the given ids."""
        if not ids:
            return []
        try:
            response = (
                await self.client.table("events")
                .select("*")
                .in_("id", sorted(ids))
                .execute()
            )
        except BACKEND_FAILURES as exc:
            raise ReadError("Failed to fetch events") from exc
        return [row.to_domain() for row in decode_list(response.data, EventRow)]

    async def insert_event(self, draft: EventDraft, created_by: str) -> Event:
        """Insert an event and return the server representation."""
        try:
            response = (
                await self.client.table("events")
                .insert(
                    {
                        "name": draft.name,
                        "description": draft.description,
                        "location": draft.location,
                        "latitude": draft.latitude,
                        "longitude": draft.longitude,
                        "start_time": draft.start_time.isoformat(),
                        "end_time": draft.end_time.isoformat(),
                        "created_by": created_by,
                    },
                    returning=ReturnMethod.representation,
                )
                .execute()
            )
        except BACKEND_FAILURES as exc:
            raise WriteError("Failed to create event") from exc
        try:
            return decode_one(response.data, EventRow).to_domain()
        except DecodeError as exc:
            raise WriteError("Failed to create event") from exc
