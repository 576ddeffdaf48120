"""Error taxonomy for the ClubCam data layer."""


class ClubCamError(Exception):
    """Base class for all ClubCam errors."""


class ConfigurationError(ClubCamError):
    """Backend URL or API key is missing; fatal at startup."""


class AuthError(ClubCamError):
    """Credential or session failure reported by the auth service."""


class NoSessionError(ClubCamError):
    """The operation requires a signed-in user."""


class ReadError(ClubCamError):
    """A row-store read or RPC call failed."""


class WriteError(ClubCamError):
    """A row-store insert failed."""


class WriteConflictError(WriteError):
    """An insert violated a uniqueness constraint."""


class StorageError(ClubCamError):
    """An object-storage upload or download failed."""


class DateFormatError(ClubCamError, ValueError):
    """A timestamp string matched none of the supported formats."""


class EncodingError(ClubCamError):
    """A storage path could not be turned into a URL."""


class DecodeError(ClubCamError):
    """A single server record did not match its expected shape."""


class AlreadyJoinedError(ClubCamError):
    """The user is already a participant of the event."""


class LocationUnavailableError(ClubCamError):
    """No device location is known for a nearby search."""


class InvalidInputError(ClubCamError, ValueError):
    """Caller-supplied arguments violate a business rule."""
