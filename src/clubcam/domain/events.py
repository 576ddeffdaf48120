"""Domain models for events and participation."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class FetchMode(str, Enum):
    """Which list of events to load."""

    NEARBY = "nearby"
    JOINED = "joined"


@dataclass(frozen=True)
class Event:
    """Represents an event stored in the backend."""

    id: str
    name: str
    description: str | None
    location: str
    latitude: float
    longitude: float
    start_time: datetime
    end_time: datetime
    created_by: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class EventDraft:
    """User-supplied fields for a new event."""

    name: str
    location: str
    latitude: float
    longitude: float
    start_time: datetime
    end_time: datetime
    description: str | None = None


@dataclass(frozen=True)
class EventParticipant:
    """Represents a user's membership in an event."""

    id: str
    event_id: str
    user_id: str
    joined_at: datetime
