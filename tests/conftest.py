"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID

import pytest

from keto_tracker.config import Settings, StorageBackend
from keto_tracker.containers import AppContainer
from keto_tracker.domain.fasting import FastingSession
from keto_tracker.domain.food import FoodEntry
from keto_tracker.domain.metabolism import MacroTargets
from keto_tracker.domain.profiles import UserProfile
from keto_tracker.services.fasting import FastingService, FastingSessionRepository
from keto_tracker.services.food_log import FoodEntryRepository, FoodLogService
from keto_tracker.services.profiles import ProfileRepository, ProfileService


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, UserProfile] = field(default_factory=dict)
    macro_targets: dict[UUID, MacroTargets] = field(default_factory=dict)
    target_writes: list[UUID] = field(default_factory=list)

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        return self.profiles.get(user_id)

    def create_profile(self, user_id: UUID, email: str) -> UserProfile:
        profile = UserProfile(id=user_id, email=email)
        self.profiles[user_id] = profile
        return profile

    def save_profile(self, profile: UserProfile) -> UserProfile:
        self.profiles[profile.id] = profile
        return profile

    def set_onboarded(self, user_id: UUID, onboarded: bool) -> None:
        current = self.profiles[user_id]
        self.profiles[user_id] = UserProfile(
            id=current.id,
            email=current.email,
            personal_info=current.personal_info,
            goals=current.goals,
            preferences=current.preferences,
            subscription=current.subscription,
            is_onboarded=onboarded,
        )

    def get_macro_targets(self, user_id: UUID) -> MacroTargets | None:
        return self.macro_targets.get(user_id)

    def set_macro_targets(self, user_id: UUID, targets: MacroTargets) -> None:
        self.macro_targets[user_id] = targets
        self.target_writes.append(user_id)


@dataclass
class InMemoryFoodEntryRepository(FoodEntryRepository):
    """In-memory food entry repository for tests."""

    entries: dict[UUID, dict[UUID, FoodEntry]] = field(default_factory=dict)

    def add_entry(self, user_id: UUID, entry: FoodEntry) -> None:
        self.entries.setdefault(user_id, {})[entry.id] = entry

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodEntry | None:
        return self.entries.get(user_id, {}).get(entry_id)

    def replace_entry(self, user_id: UUID, entry: FoodEntry) -> None:
        self.entries[user_id][entry.id] = entry

    def remove_entry(self, user_id: UUID, entry_id: UUID) -> None:
        self.entries.get(user_id, {}).pop(entry_id, None)

    def list_entries(self, user_id: UUID, start, end) -> list[FoodEntry]:
        return sorted(
            (
                entry
                for entry in self.entries.get(user_id, {}).values()
                if start <= entry.logged_at < end
            ),
            key=lambda entry: entry.logged_at,
        )


@dataclass
class InMemoryFastingSessionRepository(FastingSessionRepository):
    """In-memory fasting session repository for tests."""

    sessions: dict[UUID, FastingSession] = field(default_factory=dict)

    def create_session(self, session: FastingSession) -> None:
        self.sessions[session.id] = session

    def get_active_session(self, user_id: UUID) -> FastingSession | None:
        for session in self.sessions.values():
            if session.user_id == user_id and session.is_active:
                return session
        return None

    def update_session(self, session: FastingSession) -> None:
        self.sessions[session.id] = session

    def list_completed_sessions(self, user_id: UUID) -> list[FastingSession]:
        completed = [
            session
            for session in self.sessions.values()
            if session.user_id == user_id and not session.is_active
        ]
        return sorted(completed, key=lambda session: session.actual_end_time)


@dataclass
class FakeClock:
    """Manually advanced clock."""

    now: datetime = field(
        default_factory=lambda: datetime(2026, 3, 10, 20, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    """Records Supabase query-builder calls and replays queued responses."""

    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "insert": [],
            "update": [],
            "upsert": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_on_conflict: str | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def upsert(  # type: ignore[no-untyped-def]
        self, payload, on_conflict: str = ""
    ) -> "FakeTable":
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    @property
    def not_(self) -> "FakeTable":
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def is_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def lt(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        storage_backend=StorageBackend.LOCAL,
        local_storage_path=str(tmp_path / "storage.json"),
    )


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def food_entry_repository() -> InMemoryFoodEntryRepository:
    return InMemoryFoodEntryRepository()


@pytest.fixture
def fasting_repository() -> InMemoryFastingSessionRepository:
    return InMemoryFastingSessionRepository()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    profile_repository: InMemoryProfileRepository,
    food_entry_repository: InMemoryFoodEntryRepository,
    fasting_repository: InMemoryFastingSessionRepository,
    clock: FakeClock,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        profile_service=ProfileService(profile_repository),
        food_log_service=FoodLogService(food_entry_repository),
        fasting_service=FastingService(fasting_repository, clock=clock),
    )
