"""
Test Configuration

Pytest configuration and fixtures for the test suite.
"""

from datetime import datetime, timedelta, timezone
from typing import Generator, List

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.models import PullRequest, Team, User
from app.services import AssignmentEngine, Services, build_services
from app.storage import Storage, create_memory_storage
from app.storage.memory import InMemoryPullRequestStore


class FakeClock:
    """Deterministic clock that moves one second forward on every reading."""

    def __init__(self, start: datetime = datetime(2025, 11, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


class RecordingPullRequestStore(InMemoryPullRequestStore):
    """In-memory store that remembers every update it receives."""

    def __init__(self):
        super().__init__()
        self.updates: List[PullRequest] = []

    async def update(self, pr: PullRequest) -> None:
        self.updates.append(pr.model_copy(deep=True))
        await super().update(pr)


async def seed_team(storage: Storage, team_name: str, members: List[User]) -> None:
    """Create a team and its users directly in the directories."""
    await storage.teams.create(Team(team_name=team_name))
    await storage.users.bulk_upsert(members)


def user(user_id: str, team_name: str = "backend", is_active: bool = True) -> User:
    """Build a user whose username is derived from the id."""
    return User(user_id=user_id, username=f"user-{user_id}", team_name=team_name, is_active=is_active)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def pr_store() -> RecordingPullRequestStore:
    return RecordingPullRequestStore()


@pytest.fixture
def storage(pr_store: RecordingPullRequestStore) -> Storage:
    """Fresh in-memory directories with a recording pull request store."""
    memory = create_memory_storage()
    memory.pull_requests = pr_store
    return memory


@pytest.fixture
def services(storage: Storage, clock: FakeClock) -> Services:
    return build_services(storage, clock=clock)


@pytest.fixture
def engine(services: Services) -> AssignmentEngine:
    return services.assignment


@pytest.fixture
async def backend_team(storage: Storage) -> Storage:
    """Team "backend" with three active members u1, u2, u3 in that order."""
    await seed_team(storage, "backend", [user("u1"), user("u2"), user("u3")])
    return storage


@pytest.fixture
def client(clock: FakeClock) -> Generator[TestClient, None, None]:
    """Create a test client backed by fresh in-memory storage."""
    app = create_app(
        settings=Settings(storage_backend="memory"),
        storage=create_memory_storage(),
        clock=clock
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_team_payload() -> dict:
    """Sample /team/add request body."""
    return {
        "team_name": "backend",
        "members": [
            {"user_id": "u1", "username": "Alice", "is_active": True},
            {"user_id": "u2", "username": "Bob", "is_active": True},
            {"user_id": "u3", "username": "Charlie", "is_active": True},
        ]
    }
