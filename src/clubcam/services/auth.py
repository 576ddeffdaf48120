"""Authentication use cases."""

from dataclasses import dataclass
from typing import Protocol

from clubcam.domain.models import UserRecord
from clubcam.errors import AuthError


class AuthGateway(Protocol):
    """Interface to the backend auth service."""

    async def sign_up(self, email: str, password: str) -> UserRecord:
        """Register a new account and return its user."""

    async def sign_in(self, email: str, password: str) -> UserRecord:
        """Sign in with email and password and return the user."""

    async def sign_out(self) -> None:
        """End the current session."""

    async def current_user_id(self) -> str:
        """Return the signed-in user's id or raise NoSessionError."""


@dataclass
class AuthService:
    """Application service for sign up, sign in and sign out."""

    gateway: AuthGateway

    async def sign_up(self, email: str, password: str) -> UserRecord:
        """Create an account for the credentials."""
        return await self.gateway.sign_up(*_credentials(email, password))

    async def sign_in(self, email: str, password: str) -> UserRecord:
        """Sign in with the credentials."""
        return await self.gateway.sign_in(*_credentials(email, password))

    async def sign_out(self) -> None:
        """Sign out the current user."""
        await self.gateway.sign_out()

    async def current_user_id(self) -> str:
        """Return the signed-in user's id."""
        return await self.gateway.current_user_id()


def _credentials(email: str, password: str) -> tuple[str, str]:
    cleaned = email.strip()
    if not cleaned or not password:
        raise AuthError("Email and password are required")
    return cleaned, password
