"""Domain models for event photos."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Photo:
    """Represents a photo record plus its client-side derived fields."""

    id: str
    event_id: str
    user_id: str
    storage_path: str
    caption: str | None
    taken_at: datetime
    latitude: float | None
    longitude: float | None
    created_at: datetime
    image_url: str | None = None
    image: bytes | None = field(default=None, repr=False, compare=False)
