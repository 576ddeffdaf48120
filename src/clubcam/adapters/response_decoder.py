"""Decoding of Supabase row payloads into domain records.

Timestamps arrive in more than one shape depending on whether a row comes from
a table select or from an RPC, so every timestamp field goes through
``parse_timestamp``. List payloads are decoded on one of two paths:

* strict: the whole list is validated in one pass and any bad record fails it;
* lenient: records are validated one by one and invalid ones are dropped.

``decode_rows`` always tries the strict path first and only falls back to the
lenient path when strict validation fails, so a single malformed row never
aborts a list fetch.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from functools import lru_cache
from typing import Annotated, Generic, TypeVar

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    TypeAdapter,
    ValidationError,
)

from clubcam.domain.events import Event, EventParticipant
from clubcam.domain.photos import Photo
from clubcam.errors import DateFormatError, DecodeError

_logger = logging.getLogger(__name__)

_DATE_TIME = r"(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
# yyyy-MM-dd'T'HH:mm:ss.SSSSSSZZZZZ
_FIXED_PATTERN = re.compile(
    _DATE_TIME + r"\.(?P<fraction>\d{6})(?P<zone>Z|[+-]\d{2}:\d{2})"
)
_ISO_FRACTIONAL = re.compile(
    _DATE_TIME + r"\.(?P<fraction>\d+)(?P<zone>Z|[+-]\d{2}:?\d{2})"
)
_ISO_WHOLE = re.compile(_DATE_TIME + r"(?P<zone>Z|[+-]\d{2}:?\d{2})")


def _build(base: str, fraction: str, zone: str) -> datetime | None:
    micros = fraction[:6].ljust(6, "0")
    try:
        parsed = datetime.strptime(f"{base}.{micros}{zone}", "%Y-%m-%dT%H:%M:%S.%f%z")
    except ValueError:
        return None
    return parsed.astimezone(UTC)


def _parse_fixed_pattern(value: str) -> datetime | None:
    match = _FIXED_PATTERN.fullmatch(value)
    if match is None:
        return None
    return _build(match["base"], match["fraction"], match["zone"])


def _parse_iso_fractional(value: str) -> datetime | None:
    match = _ISO_FRACTIONAL.fullmatch(value)
    if match is None:
        return None
    return _build(match["base"], match["fraction"], match["zone"])


def _parse_iso_whole(value: str) -> datetime | None:
    match = _ISO_WHOLE.fullmatch(value)
    if match is None:
        return None
    return _build(match["base"], "", match["zone"])


_TIMESTAMP_PARSERS: tuple[Callable[[str], datetime | None], ...] = (
    _parse_fixed_pattern,
    _parse_iso_fractional,
    _parse_iso_whole,
)


def parse_timestamp(value: str) -> datetime:
    """Parse a server timestamp into an aware UTC datetime."""
    text = value.strip()
    for parser in _TIMESTAMP_PARSERS:
        parsed = parser(text)
        if parsed is not None:
            return parsed
    raise DateFormatError(f"Cannot decode date: {value}")


def _coerce_timestamp(value: object) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            raise DateFormatError(f"Timestamp without zone: {value.isoformat()}")
        return value.astimezone(UTC)
    if isinstance(value, str):
        return parse_timestamp(value)
    raise DateFormatError(f"Cannot decode date: {value!r}")


Timestamp = Annotated[datetime, BeforeValidator(_coerce_timestamp)]


class EventRow(BaseModel):
    """Row shape of the ``events`` table and the ``nearby_events`` RPC."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    name: str
    description: str | None = None
    location: str
    latitude: float
    longitude: float
    start_time: Timestamp
    end_time: Timestamp
    created_by: str
    created_at: Timestamp
    updated_at: Timestamp

    def to_domain(self) -> Event:
        return Event(
            id=self.id,
            name=self.name,
            description=self.description,
            location=self.location,
            latitude=self.latitude,
            longitude=self.longitude,
            start_time=self.start_time,
            end_time=self.end_time,
            created_by=self.created_by,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class ParticipantRow(BaseModel):
    """Row shape of the ``event_participants`` table."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    event_id: str
    user_id: str
    joined_at: Timestamp

    def to_domain(self) -> EventParticipant:
        return EventParticipant(
            id=self.id,
            event_id=self.event_id,
            user_id=self.user_id,
            joined_at=self.joined_at,
        )


class PhotoRow(BaseModel):
    """Row shape of the ``photos`` table."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    event_id: str
    user_id: str
    storage_path: str
    caption: str | None = None
    taken_at: Timestamp
    latitude: float | None = None
    longitude: float | None = None
    created_at: Timestamp

    def to_domain(self, image_url: str | None = None) -> Photo:
        return Photo(
            id=self.id,
            event_id=self.event_id,
            user_id=self.user_id,
            storage_path=self.storage_path,
            caption=self.caption,
            taken_at=self.taken_at,
            latitude=self.latitude,
            longitude=self.longitude,
            created_at=self.created_at,
            image_url=image_url,
        )


RowT = TypeVar("RowT", bound=BaseModel)


class DecodePath(str, Enum):
    """Which decode path produced a result."""

    STRICT = "strict"
    LENIENT = "lenient"


@dataclass(frozen=True)
class DecodedRows(Generic[RowT]):
    """Rows decoded from a list payload and how they were obtained."""

    rows: list[RowT]
    path: DecodePath
    dropped: int = 0


@lru_cache(maxsize=None)
def _list_adapter(shape: type[BaseModel]) -> TypeAdapter:
    return TypeAdapter(list[shape])  # type: ignore[valid-type]


def decode_rows(raw: object, shape: type[RowT]) -> DecodedRows[RowT]:
    """Decode a list payload, falling back to per-record validation."""
    if not isinstance(raw, list):
        _logger.warning(
            "Expected a list of %s rows, got %s", shape.__name__, type(raw).__name__
        )
        return DecodedRows(rows=[], path=DecodePath.LENIENT)
    try:
        rows = _list_adapter(shape).validate_python(raw)
    except ValidationError as exc:
        _logger.warning(
            "Strict decode of %s rows failed, using lenient decode: %s",
            shape.__name__,
            exc.error_count(),
        )
    else:
        return DecodedRows(rows=rows, path=DecodePath.STRICT)

    decoded: list[RowT] = []
    for record in raw:
        try:
            decoded.append(shape.model_validate(record))
        except ValidationError:
            continue
    dropped = len(raw) - len(decoded)
    if dropped:
        _logger.warning("Dropped %s malformed %s rows", dropped, shape.__name__)
    return DecodedRows(rows=decoded, path=DecodePath.LENIENT, dropped=dropped)


def decode_list(raw: object, shape: type[RowT]) -> list[RowT]:
    """Decode a list payload into rows; never raises."""
    return decode_rows(raw, shape).rows


def decode_one(raw: object, shape: type[RowT]) -> RowT:
    """Strictly decode a single record, or the first record of a list."""
    record = raw
    if isinstance(raw, list):
        if not raw:
            raise DecodeError(f"Empty response for {shape.__name__}")
        record = raw[0]
    try:
        return shape.model_validate(record)
    except ValidationError as exc:
        raise DecodeError(f"Malformed {shape.__name__}: {exc}") from exc
