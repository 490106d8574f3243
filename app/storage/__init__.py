"""
Storage Package

This package contains the directories the services read and write through:
- base: capability interfaces and storage exceptions
- memory: process-local implementations
- sqlite: durable implementations on sqlite3
"""

from dataclasses import dataclass
from typing import Optional

from app.config import Settings
from app.logging_config import get_logger
from app.storage.base import (
    PullRequestStore,
    RecordAlreadyExists,
    RecordNotFound,
    StorageError,
    TeamDirectory,
    UserDirectory,
)
from app.storage.memory import (
    InMemoryPullRequestStore,
    InMemoryTeamDirectory,
    InMemoryUserDirectory,
)
from app.storage.sqlite import (
    SQLiteDatabase,
    SQLitePullRequestStore,
    SQLiteTeamDirectory,
    SQLiteUserDirectory,
)

logger = get_logger(__name__)


@dataclass
class Storage:
    """The three directories of one backend, plus its lifecycle hooks."""
    users: UserDirectory
    teams: TeamDirectory
    pull_requests: PullRequestStore
    database: Optional[SQLiteDatabase] = None

    async def initialize(self) -> None:
        """Prepare the backend (creates the SQLite schema when present)."""
        if self.database is not None:
            await self.database.initialize()


def create_memory_storage() -> Storage:
    """Create a fresh set of in-memory directories."""
    users = InMemoryUserDirectory()
    return Storage(
        users=users,
        teams=InMemoryTeamDirectory(users),
        pull_requests=InMemoryPullRequestStore()
    )


def create_sqlite_storage(path: str, timeout: float = 5.0) -> Storage:
    """Create SQLite directories sharing one database file."""
    db = SQLiteDatabase(path, timeout=timeout)
    return Storage(
        users=SQLiteUserDirectory(db),
        teams=SQLiteTeamDirectory(db),
        pull_requests=SQLitePullRequestStore(db),
        database=db
    )


def create_storage(settings: Settings) -> Storage:
    """
    Create the directories selected by configuration.

    Args:
        settings: Application settings

    Returns:
        Storage bundle for the configured backend
    """
    logger.info(
        "Creating storage",
        backend=settings.storage_backend,
        database_path=settings.database_path if settings.storage_backend == "sqlite" else None
    )
    if settings.storage_backend == "sqlite":
        return create_sqlite_storage(settings.database_path, timeout=settings.database_timeout)
    return create_memory_storage()


__all__ = [
    "Storage",
    "create_storage",
    "create_memory_storage",
    "create_sqlite_storage",
    "UserDirectory",
    "TeamDirectory",
    "PullRequestStore",
    "StorageError",
    "RecordNotFound",
    "RecordAlreadyExists",
]
