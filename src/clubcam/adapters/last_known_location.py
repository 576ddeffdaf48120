"""Holder for the most recent device location."""

from dataclasses import dataclass

from clubcam.domain.models import Coordinates
from clubcam.services.events import LocationProvider


@dataclass
class LastKnownLocation(LocationProvider):
    """Location provider fed by the platform location service."""

    location: Coordinates | None = None

    def update(self, latitude: float, longitude: float) -> None:
        """Record a new device fix."""
        self.location = Coordinates(latitude=latitude, longitude=longitude)

    def clear(self) -> None:
        """Forget the last fix, e.g. after permission is revoked."""
        self.location = None

    def current_location(self) -> Coordinates | None:
        """Return the last recorded fix."""
        return self.location
