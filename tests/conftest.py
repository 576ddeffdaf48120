"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from types import SimpleNamespace

import pytest

from clubcam.adapters.last_known_location import LastKnownLocation
from clubcam.adapters.storage_urls import StorageUrlResolver
from clubcam.config import Settings
from clubcam.domain.events import Event, EventDraft
from clubcam.domain.models import UserRecord
from clubcam.domain.photos import Photo
from clubcam.errors import AuthError, NoSessionError, WriteConflictError, WriteError
from clubcam.services.auth import AuthGateway, AuthService
from clubcam.services.events import (
    EventRepository,
    EventService,
    ParticipantRepository,
)
from clubcam.services.photos import (
    PhotoDownloadClient,
    PhotoRepository,
    PhotoService,
    PhotoStorage,
)

BASE_URL = "https://example.supabase.co"


def make_event(event_id: str = "e1", **overrides: object) -> Event:
    values: dict[str, object] = {
        "id": event_id,
        "name": "Warehouse party",
        "description": "Late night set",
        "location": "Mission District",
        "latitude": 37.7749,
        "longitude": -122.4194,
        "start_time": datetime(2025, 3, 4, 20, 0, tzinfo=UTC),
        "end_time": datetime(2025, 3, 5, 2, 0, tzinfo=UTC),
        "created_by": "u2",
        "created_at": datetime(2025, 3, 1, 12, 0, tzinfo=UTC),
        "updated_at": datetime(2025, 3, 1, 12, 0, tzinfo=UTC),
    }
    values.update(overrides)
    return Event(**values)  # type: ignore[arg-type]


def event_row(event_id: str = "e1", **overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": event_id,
        "name": "Warehouse party",
        "description": None,
        "location": "Mission District",
        "latitude": 37.7749,
        "longitude": -122.4194,
        "start_time": "2025-03-04T20:00:00.000000+00:00",
        "end_time": "2025-03-05T02:00:00Z",
        "created_by": "u2",
        "created_at": "2025-03-01T12:00:00.123Z",
        "updated_at": "2025-03-01T12:00:00.123456+00:00",
    }
    row.update(overrides)
    return row


def photo_row(photo_id: str = "p1", **overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": photo_id,
        "event_id": "e1",
        "user_id": "u1",
        "storage_path": f"photos/e1/{photo_id}.jpg",
        "caption": None,
        "taken_at": "2025-03-04T21:00:00.000000+00:00",
        "latitude": None,
        "longitude": None,
        "created_at": "2025-03-04T21:00:01Z",
    }
    row.update(overrides)
    return row


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    """Chainable stand-in for a PostgREST table query builder."""

    name: str
    response_queue: dict[str, list[object]] = field(
        default_factory=lambda: {"select": [], "insert": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None
    last_returning: object | None = None
    executed: int = 0

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def queue_error(self, action: str, error: Exception) -> None:
        self.response_queue[action].append(error)

    def select(self, *_args) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "select"
        return self

    def insert(self, payload: object, returning: object = None) -> "FakeTable":
        self._action = "insert"
        self.last_payload = payload
        self.last_returning = returning
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def in_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    async def execute(self) -> FakeResponse:
        self.executed += 1
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        result = queue.pop(0) if queue else []
        if isinstance(result, Exception):
            raise result
        return FakeResponse(data=result)  # type: ignore[arg-type]


@dataclass
class FakeRpc:
    result: object

    async def execute(self) -> FakeResponse:
        if isinstance(self.result, Exception):
            raise self.result
        return FakeResponse(data=self.result)  # type: ignore[arg-type]


@dataclass
class FakeBucket:
    name: str
    uploads: dict[str, bytes]
    options: dict[str, dict[str, str]]
    error: Exception | None = None

    async def upload(
        self, path: str, file: bytes, file_options: dict[str, str] | None = None
    ) -> SimpleNamespace:
        if self.error is not None:
            raise self.error
        self.uploads[path] = file
        self.options[path] = file_options or {}
        return SimpleNamespace(path=path)


@dataclass
class FakeStorage:
    uploads: dict[str, bytes] = field(default_factory=dict)
    options: dict[str, dict[str, str]] = field(default_factory=dict)
    buckets: list[str] = field(default_factory=list)
    error: Exception | None = None

    def from_(self, bucket: str) -> FakeBucket:
        self.buckets.append(bucket)
        return FakeBucket(bucket, self.uploads, self.options, self.error)


@dataclass
class FakeAuth:
    user: object | None = None
    session: object | None = None
    error: Exception | None = None
    signed_out: bool = False

    async def sign_up(self, credentials: dict[str, str]) -> SimpleNamespace:
        return self._respond(credentials)

    async def sign_in_with_password(
        self, credentials: dict[str, str]
    ) -> SimpleNamespace:
        return self._respond(credentials)

    async def sign_out(self) -> None:
        if self.error is not None:
            raise self.error
        self.signed_out = True

    async def get_session(self):  # type: ignore[no-untyped-def]
        if self.error is not None:
            raise self.error
        return self.session

    def _respond(self, credentials: dict[str, str]) -> SimpleNamespace:
        if self.error is not None:
            raise self.error
        return SimpleNamespace(user=self.user, session=self.session)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    rpc_results: list[object] = field(default_factory=list)
    rpc_calls: list[tuple[str, dict[str, object]]] = field(default_factory=list)
    auth: FakeAuth = field(default_factory=FakeAuth)
    storage: FakeStorage = field(default_factory=FakeStorage)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]

    def rpc(self, name: str, params: dict[str, object]) -> FakeRpc:
        self.rpc_calls.append((name, params))
        result = self.rpc_results.pop(0) if self.rpc_results else []
        return FakeRpc(result)

    @property
    def network_calls(self) -> int:
        return len(self.rpc_calls) + sum(t.executed for t in self.tables.values())


@dataclass
class InMemoryAuthGateway(AuthGateway):
    """In-memory auth gateway for tests."""

    user_id: str | None = "u1"
    accounts: dict[str, str] = field(default_factory=dict)

    async def sign_up(self, email: str, password: str) -> UserRecord:
        if email in self.accounts:
            raise AuthError("User already registered")
        self.accounts[email] = password
        self.user_id = f"user-{len(self.accounts)}"
        return UserRecord(id=self.user_id, email=email)

    async def sign_in(self, email: str, password: str) -> UserRecord:
        if self.accounts.get(email) != password:
            raise AuthError("Invalid login credentials")
        self.user_id = f"user-{list(self.accounts).index(email) + 1}"
        return UserRecord(id=self.user_id, email=email)

    async def sign_out(self) -> None:
        self.user_id = None

    async def current_user_id(self) -> str:
        if self.user_id is None:
            raise NoSessionError("Sign in required")
        return self.user_id


@dataclass
class InMemoryEventRepository(EventRepository):
    """In-memory event repository for tests."""

    events: dict[str, Event] = field(default_factory=dict)
    nearby_calls: list[tuple[float, float, float]] = field(default_factory=list)
    by_ids_calls: list[set[str]] = field(default_factory=list)

    async def nearby_events(
        self, latitude: float, longitude: float, radius_km: float
    ) -> list[Event]:
        self.nearby_calls.append((latitude, longitude, radius_km))
        return list(self.events.values())

    async def events_by_ids(self, ids: set[str]) -> list[Event]:
        self.by_ids_calls.append(set(ids))
        return [event for event_id, event in self.events.items() if event_id in ids]

    async def insert_event(self, draft: EventDraft, created_by: str) -> Event:
        event_id = f"e{len(self.events) + 1}"
        now = datetime(2025, 3, 1, tzinfo=UTC)
        event = Event(
            id=event_id,
            name=draft.name,
            description=draft.description,
            location=draft.location,
            latitude=draft.latitude,
            longitude=draft.longitude,
            start_time=draft.start_time,
            end_time=draft.end_time,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        self.events[event_id] = event
        return event


@dataclass
class InMemoryParticipantRepository(ParticipantRepository):
    """In-memory participant repository enforcing (event_id, user_id) uniqueness."""

    rows: list[tuple[str, str]] = field(default_factory=list)
    stale_reads: bool = False

    async def insert_participant(self, event_id: str, user_id: str) -> None:
        if (event_id, user_id) in self.rows:
            raise WriteConflictError("duplicate key value")
        self.rows.append((event_id, user_id))

    async def has_participant(self, event_id: str, user_id: str) -> bool:
        if self.stale_reads:
            return False
        return (event_id, user_id) in self.rows

    async def joined_event_ids(self, user_id: str) -> set[str]:
        return {event_id for event_id, uid in self.rows if uid == user_id}


@dataclass
class InMemoryPhotoStorage(PhotoStorage):
    """In-memory blob storage for tests."""

    blobs: dict[str, bytes] = field(default_factory=dict)

    async def upload_photo_blob(self, path: str, data: bytes) -> None:
        self.blobs[path] = data


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """In-memory photo repository for tests."""

    url_resolver: StorageUrlResolver
    photos: list[Photo] = field(default_factory=list)
    fail_inserts: bool = False

    async def insert_photo(self, photo: Photo) -> Photo:
        if self.fail_inserts:
            raise WriteError("Failed to create photo metadata")
        self.photos.append(photo)
        return replace(photo, image_url=self.url_resolver.resolve(photo.storage_path))

    async def photos_by_event(self, event_id: str) -> list[Photo]:
        matching = [photo for photo in self.photos if photo.event_id == event_id]
        matching.sort(key=lambda photo: photo.taken_at, reverse=True)
        return [
            replace(photo, image_url=self.url_resolver.resolve(photo.storage_path))
            for photo in matching
        ]


@dataclass
class FakePhotoDownloadClient(PhotoDownloadClient):
    """Fake download client returning static bytes."""

    content: bytes = b"jpeg-bytes"
    requested: list[str] = field(default_factory=list)

    async def download(self, url: str) -> bytes:
        self.requested.append(url)
        return self.content


@pytest.fixture
def settings() -> Settings:
    return Settings(supabase_url=BASE_URL, supabase_anon_key="anon-key")


@pytest.fixture
def url_resolver() -> StorageUrlResolver:
    return StorageUrlResolver(base_url=BASE_URL, bucket="event-photos")


@pytest.fixture
def auth_gateway() -> InMemoryAuthGateway:
    return InMemoryAuthGateway()


@pytest.fixture
def event_repository() -> InMemoryEventRepository:
    return InMemoryEventRepository()


@pytest.fixture
def participant_repository() -> InMemoryParticipantRepository:
    return InMemoryParticipantRepository()


@pytest.fixture
def location() -> LastKnownLocation:
    return LastKnownLocation()


@pytest.fixture
def event_service(
    auth_gateway: InMemoryAuthGateway,
    event_repository: InMemoryEventRepository,
    participant_repository: InMemoryParticipantRepository,
    location: LastKnownLocation,
) -> EventService:
    return EventService(
        auth=auth_gateway,
        events=event_repository,
        participants=participant_repository,
        location_provider=location,
        default_radius_km=25.0,
        max_radius_km=500.0,
    )


@pytest.fixture
def photo_storage() -> InMemoryPhotoStorage:
    return InMemoryPhotoStorage()


@pytest.fixture
def photo_repository(url_resolver: StorageUrlResolver) -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository(url_resolver=url_resolver)


@pytest.fixture
def download_client() -> FakePhotoDownloadClient:
    return FakePhotoDownloadClient()


@pytest.fixture
def photo_service(
    auth_gateway: InMemoryAuthGateway,
    photo_storage: InMemoryPhotoStorage,
    photo_repository: InMemoryPhotoRepository,
    download_client: FakePhotoDownloadClient,
) -> PhotoService:
    return PhotoService(
        auth=auth_gateway,
        storage=photo_storage,
        repository=photo_repository,
        download_client=download_client,
    )


@pytest.fixture
def auth_service(auth_gateway: InMemoryAuthGateway) -> AuthService:
    return AuthService(auth_gateway)


@pytest.fixture
def supabase_client() -> FakeSupabaseClient:
    return FakeSupabaseClient()
