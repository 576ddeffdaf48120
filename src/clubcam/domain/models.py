"""Domain models for ClubCam users."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserRecord:
    """Represents an authenticated user."""

    id: str
    email: str
    display_name: str | None = None
    username: str | None = None
    avatar_url: str | None = None

    @property
    def handle(self) -> str:
        """Return the best available name to show for the user."""
        if self.display_name:
            return self.display_name
        if self.username:
            return self.username
        local_part = self.email.split("@", 1)[0]
        return local_part or "User"


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair in degrees."""

    latitude: float
    longitude: float
