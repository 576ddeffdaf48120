"""Supabase-backed event participant repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import uuid4

from supabase import AsyncClient

from clubcam.adapters.response_decoder import ParticipantRow, decode_list
from clubcam.adapters.supabase_errors import BACKEND_FAILURES, is_unique_violation
from clubcam.errors import ReadError, WriteConflictError, WriteError
from clubcam.services.events import ParticipantRepository


@dataclass
class SupabaseParticipantRepository(ParticipantRepository):
    """Supabase implementation for ``event_participants`` rows.

    The table carries a unique index on ``(event_id, user_id)``; a violation of
    it surfaces as ``WriteConflictError``.
    """

    client: AsyncClient

    async def insert_participant(self, event_id: str, user_id: str) -> None:
        """Insert a participation row."""
        try:
            await (
                self.client.table("event_participants")
                .insert(
                    {
                        "id": str(uuid4()),
                        "event_id": event_id,
                        "user_id": user_id,
                        "joined_at": datetime.now(tz=UTC).isoformat(),
                    }
                )
                .execute()
            )
        except BACKEND_FAILURES as exc:
            if is_unique_violation(exc):
                raise WriteConflictError(
                    f"User {user_id} already joined event {event_id}"
                ) from exc
            raise WriteError("Failed to join event") from exc

    async def has_participant(self, event_id: str, user_id: str) -> bool:
        """Return whether a participation row exists."""
        try:
            response = (
                await self.client.table("event_participants")
                .select("id")
                .eq("event_id", event_id)
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        except BACKEND_FAILURES as exc:
            raise ReadError("Failed to check event participation") from exc
        return bool(response.data)

    async def joined_event_ids(self, user_id: str) -> set[str]:
        """Return ids of the events a user joined."""
        try:
            response = (
                await self.client.table("event_participants")
                .select("*")
                .eq("user_id", user_id)
                .execute()
            )
        except BACKEND_FAILURES as exc:
            raise ReadError("Failed to fetch joined events") from exc
        participants = [
            row.to_domain() for row in decode_list(response.data, ParticipantRow)
        ]
        return {participant.event_id for participant in participants}
