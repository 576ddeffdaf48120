"""Supabase-backed authentication gateway."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx
from supabase import AsyncClient
from supabase import AuthError as SupabaseAuthError

from clubcam.domain.models import UserRecord
from clubcam.errors import AuthError, NoSessionError
from clubcam.services.auth import AuthGateway

if TYPE_CHECKING:
    from supabase_auth.types import User as AuthUser

_AUTH_FAILURES = (SupabaseAuthError, httpx.HTTPError)


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Supabase implementation for sign up, sign in and session lookup."""

    client: AsyncClient

    async def sign_up(self, email: str, password: str) -> UserRecord:
        """Register a new account."""
        try:
            response = await self.client.auth.sign_up(
                {"email": email, "password": password}
            )
        except _AUTH_FAILURES as exc:
            raise AuthError(f"Sign up failed: {exc}") from exc
        if response.user is None:
            raise AuthError("Sign up returned no user")
        return _to_user(response.user)

    async def sign_in(self, email: str, password: str) -> UserRecord:
        """Sign in with email and password."""
        try:
            response = await self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except _AUTH_FAILURES as exc:
            raise AuthError(f"Sign in failed: {exc}") from exc
        if response.user is None:
            raise AuthError("Sign in returned no user")
        return _to_user(response.user)

    async def sign_out(self) -> None:
        """End the current session."""
        try:
            await self.client.auth.sign_out()
        except _AUTH_FAILURES as exc:
            raise AuthError(f"Sign out failed: {exc}") from exc

    async def current_user_id(self) -> str:
        """Return the id of the user owning the current session."""
        try:
            session = await self.client.auth.get_session()
        except _AUTH_FAILURES as exc:
            raise NoSessionError("Session could not be restored") from exc
        if session is None or session.user is None:
            raise NoSessionError("Sign in required")
        return str(session.user.id)


def _to_user(auth_user: AuthUser) -> UserRecord:
    metadata = auth_user.user_metadata or {}
    return UserRecord(
        id=str(auth_user.id),
        email=auth_user.email or "",
        display_name=metadata.get("display_name"),
        username=metadata.get("username"),
        avatar_url=metadata.get("avatar_url"),
    )
