"""
Directory Interfaces Module

Narrow capability interfaces the services depend on. Each is satisfied
by the in-memory and SQLite implementations in this package and can be
replaced by any other object with the same coroutine methods.

Design Decisions:
- Protocols instead of base classes, so fakes need no inheritance
- "Missing" and "duplicate" are reported with dedicated exceptions that
  services map to domain errors; every other failure is a StorageError
- Implementations return copies, never records they still hold
"""

from typing import List, Protocol

from app.models import PullRequest, PullRequestShort, ReviewerStat, Team, User


class StorageError(Exception):
    """Base exception for directory failures."""
    pass


class RecordNotFound(StorageError):
    """The requested record does not exist."""
    pass


class RecordAlreadyExists(StorageError):
    """A record with the same identity already exists."""
    pass


class UserDirectory(Protocol):
    """Resolves, lists and updates users."""

    async def get_by_id(self, user_id: str) -> User:
        """Return the user or raise RecordNotFound."""
        ...

    async def list_by_team(self, team_name: str, only_active: bool) -> List[User]:
        """Return members of a team in stable directory order."""
        ...

    async def set_active(self, user_id: str, is_active: bool) -> User:
        """Update the active flag and return the user, or raise RecordNotFound."""
        ...

    async def bulk_upsert(self, users: List[User]) -> None:
        """Insert users, updating any that already exist."""
        ...


class TeamDirectory(Protocol):
    """Resolves and creates teams."""

    async def get_by_name(self, team_name: str) -> Team:
        """Return the team with its members or raise RecordNotFound."""
        ...

    async def create(self, team: Team) -> None:
        """Create a team or raise RecordAlreadyExists."""
        ...


class PullRequestStore(Protocol):
    """Stores pull requests and aggregates reviewer workload."""

    async def create(self, pr: PullRequest) -> None:
        """Insert a pull request or raise RecordAlreadyExists."""
        ...

    async def get_by_id(self, pr_id: str) -> PullRequest:
        """Return the pull request or raise RecordNotFound."""
        ...

    async def update(self, pr: PullRequest) -> None:
        """Overwrite an existing pull request or raise RecordNotFound."""
        ...

    async def list_by_reviewer(self, user_id: str) -> List[PullRequestShort]:
        """Return pull requests the user reviews, ordered by pull request id."""
        ...

    async def get_reviewer_stats(self) -> List[ReviewerStat]:
        """Count assignments per reviewer across all pull requests, ordered by user id."""
        ...
