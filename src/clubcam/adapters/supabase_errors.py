"""Exceptions raised by the Supabase client stack."""

import httpx
from postgrest.exceptions import APIError

BACKEND_FAILURES: tuple[type[Exception], ...] = (APIError, httpx.HTTPError)

_UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: Exception) -> bool:
    """Return whether a PostgREST error reports a unique-constraint conflict."""
    return isinstance(exc, APIError) and exc.code == _UNIQUE_VIOLATION
