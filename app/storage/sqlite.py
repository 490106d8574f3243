"""
SQLite Directories

Durable implementations of the directory interfaces on top of the
standard library sqlite3 module.

Design Decisions:
- One short-lived connection per operation, each operation in its own transaction
- Blocking sqlite calls run in a worker thread so the event loop stays free
- Locked/busy databases are retried here, in the storage layer, with tenacity
- Reviewer ids are stored as a JSON array and queried with json_each
- Users are listed in rowid order; an upsert keeps the original rowid
- No foreign keys; the services resolve teams and authors before writing
"""

import asyncio
import json
import sqlite3
from datetime import datetime
from typing import Callable, List, Optional, TypeVar

from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from app.logging_config import get_logger
from app.models import (
    PullRequest,
    PullRequestShort,
    PullRequestStatus,
    ReviewerStat,
    Team,
    TeamMember,
    User,
)
from app.storage.base import RecordAlreadyExists, RecordNotFound, StorageError

logger = get_logger(__name__)

T = TypeVar("T")

SCHEMA = """
CREATE TABLE IF NOT EXISTS teams (
    team_name TEXT PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS users (
    user_id   TEXT PRIMARY KEY,
    username  TEXT NOT NULL,
    team_name TEXT NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1
);

CREATE INDEX IF NOT EXISTS idx_users_team_name ON users (team_name);

CREATE TABLE IF NOT EXISTS pull_requests (
    pull_request_id    TEXT PRIMARY KEY,
    pull_request_name  TEXT NOT NULL,
    author_id          TEXT NOT NULL,
    status             TEXT NOT NULL,
    assigned_reviewers TEXT NOT NULL DEFAULT '[]',
    created_at         TEXT,
    merged_at          TEXT
);
"""


def _is_locked(exc: BaseException) -> bool:
    """Check if a sqlite error is a transient lock conflict."""
    if not isinstance(exc, sqlite3.OperationalError):
        return False
    message = str(exc).lower()
    return "locked" in message or "busy" in message


def _dt_to_sqlite(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _dt_from_sqlite(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        user_id=row["user_id"],
        username=row["username"],
        team_name=row["team_name"],
        is_active=bool(row["is_active"])
    )


def _row_to_pull_request(row: sqlite3.Row) -> PullRequest:
    return PullRequest(
        pull_request_id=row["pull_request_id"],
        pull_request_name=row["pull_request_name"],
        author_id=row["author_id"],
        status=PullRequestStatus(row["status"]),
        assigned_reviewers=json.loads(row["assigned_reviewers"]),
        created_at=_dt_from_sqlite(row["created_at"]),
        merged_at=_dt_from_sqlite(row["merged_at"])
    )


class SQLiteDatabase:
    """
    Connection and transaction handling shared by the SQLite directories.

    Usage:
        db = SQLiteDatabase("reviewers.db")
        await db.initialize()
        users = SQLiteUserDirectory(db)
    """

    def __init__(self, path: str, timeout: float = 5.0):
        if not path:
            raise ValueError("SQLite database path is required")
        self.path = path
        self.timeout = timeout

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        return conn

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        retry=retry_if_exception(_is_locked),
        reraise=True
    )
    def _execute(self, operation: Callable[[sqlite3.Connection], T]) -> T:
        conn = self._connect()
        try:
            with conn:
                return operation(conn)
        finally:
            conn.close()

    async def run(self, operation: Callable[[sqlite3.Connection], T]) -> T:
        """
        Run an operation inside a transaction on a worker thread.

        Args:
            operation: Callable receiving an open connection

        Returns:
            Whatever the operation returns

        Raises:
            RecordNotFound, RecordAlreadyExists: Raised by the operation itself
            StorageError: Any other sqlite failure
        """
        try:
            return await asyncio.to_thread(self._execute, operation)
        except sqlite3.Error as e:
            logger.error(
                "SQLite operation failed",
                path=self.path,
                error=str(e),
                error_type=type(e).__name__
            )
            raise StorageError(f"sqlite operation failed: {e}") from e

    async def initialize(self) -> None:
        """Create tables and indexes if they do not exist yet."""
        await self.run(lambda conn: conn.executescript(SCHEMA))
        logger.info("SQLite schema ready", path=self.path)


class SQLiteUserDirectory:
    """User directory backed by the users table."""

    def __init__(self, db: SQLiteDatabase):
        self._db = db

    async def get_by_id(self, user_id: str) -> User:
        def operation(conn: sqlite3.Connection) -> User:
            row = conn.execute(
                "SELECT user_id, username, team_name, is_active FROM users WHERE user_id = ?",
                (user_id,)
            ).fetchone()
            if row is None:
                raise RecordNotFound(f"user {user_id}")
            return _row_to_user(row)

        return await self._db.run(operation)

    async def list_by_team(self, team_name: str, only_active: bool) -> List[User]:
        query = "SELECT user_id, username, team_name, is_active FROM users WHERE team_name = ?"
        if only_active:
            query += " AND is_active = 1"
        query += " ORDER BY rowid"

        def operation(conn: sqlite3.Connection) -> List[User]:
            return [_row_to_user(row) for row in conn.execute(query, (team_name,))]

        return await self._db.run(operation)

    async def set_active(self, user_id: str, is_active: bool) -> User:
        def operation(conn: sqlite3.Connection) -> User:
            cursor = conn.execute(
                "UPDATE users SET is_active = ? WHERE user_id = ?",
                (int(is_active), user_id)
            )
            if cursor.rowcount == 0:
                raise RecordNotFound(f"user {user_id}")
            row = conn.execute(
                "SELECT user_id, username, team_name, is_active FROM users WHERE user_id = ?",
                (user_id,)
            ).fetchone()
            return _row_to_user(row)

        return await self._db.run(operation)

    async def bulk_upsert(self, users: List[User]) -> None:
        if not users:
            return

        def operation(conn: sqlite3.Connection) -> None:
            conn.executemany(
                """
                INSERT INTO users (user_id, username, team_name, is_active)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (user_id) DO UPDATE SET
                    username  = excluded.username,
                    team_name = excluded.team_name,
                    is_active = excluded.is_active
                """,
                [(u.user_id, u.username, u.team_name, int(u.is_active)) for u in users]
            )

        await self._db.run(operation)


class SQLiteTeamDirectory:
    """Team directory backed by the teams table, members read from users."""

    def __init__(self, db: SQLiteDatabase):
        self._db = db

    async def get_by_name(self, team_name: str) -> Team:
        def operation(conn: sqlite3.Connection) -> Team:
            row = conn.execute(
                "SELECT team_name FROM teams WHERE team_name = ?", (team_name,)
            ).fetchone()
            if row is None:
                raise RecordNotFound(f"team {team_name}")
            members = [
                TeamMember(
                    user_id=m["user_id"],
                    username=m["username"],
                    is_active=bool(m["is_active"])
                )
                for m in conn.execute(
                    "SELECT user_id, username, is_active FROM users "
                    "WHERE team_name = ? ORDER BY user_id",
                    (team_name,)
                )
            ]
            return Team(team_name=row["team_name"], members=members)

        return await self._db.run(operation)

    async def create(self, team: Team) -> None:
        def operation(conn: sqlite3.Connection) -> None:
            try:
                conn.execute("INSERT INTO teams (team_name) VALUES (?)", (team.team_name,))
            except sqlite3.IntegrityError as e:
                raise RecordAlreadyExists(f"team {team.team_name}") from e

        await self._db.run(operation)


class SQLitePullRequestStore:
    """Pull request store backed by the pull_requests table."""

    def __init__(self, db: SQLiteDatabase):
        self._db = db

    async def create(self, pr: PullRequest) -> None:
        def operation(conn: sqlite3.Connection) -> None:
            try:
                conn.execute(
                    """
                    INSERT INTO pull_requests (
                        pull_request_id, pull_request_name, author_id, status,
                        assigned_reviewers, created_at, merged_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        pr.pull_request_id,
                        pr.pull_request_name,
                        pr.author_id,
                        pr.status.value,
                        json.dumps(pr.assigned_reviewers),
                        _dt_to_sqlite(pr.created_at),
                        _dt_to_sqlite(pr.merged_at),
                    )
                )
            except sqlite3.IntegrityError as e:
                raise RecordAlreadyExists(f"pull request {pr.pull_request_id}") from e

        await self._db.run(operation)

    async def get_by_id(self, pr_id: str) -> PullRequest:
        def operation(conn: sqlite3.Connection) -> PullRequest:
            row = conn.execute(
                "SELECT * FROM pull_requests WHERE pull_request_id = ?", (pr_id,)
            ).fetchone()
            if row is None:
                raise RecordNotFound(f"pull request {pr_id}")
            return _row_to_pull_request(row)

        return await self._db.run(operation)

    async def update(self, pr: PullRequest) -> None:
        def operation(conn: sqlite3.Connection) -> None:
            cursor = conn.execute(
                """
                UPDATE pull_requests
                SET
                    pull_request_name  = ?,
                    author_id          = ?,
                    status             = ?,
                    assigned_reviewers = ?,
                    created_at         = ?,
                    merged_at          = COALESCE(merged_at, ?)
                WHERE pull_request_id = ?
                """,
                (
                    pr.pull_request_name,
                    pr.author_id,
                    pr.status.value,
                    json.dumps(pr.assigned_reviewers),
                    _dt_to_sqlite(pr.created_at),
                    _dt_to_sqlite(pr.merged_at),
                    pr.pull_request_id,
                )
            )
            if cursor.rowcount == 0:
                raise RecordNotFound(f"pull request {pr.pull_request_id}")

        await self._db.run(operation)

    async def list_by_reviewer(self, user_id: str) -> List[PullRequestShort]:
        def operation(conn: sqlite3.Connection) -> List[PullRequestShort]:
            rows = conn.execute(
                """
                SELECT pull_request_id, pull_request_name, author_id, status
                FROM pull_requests AS p
                WHERE EXISTS (
                    SELECT 1 FROM json_each(p.assigned_reviewers) WHERE value = ?
                )
                ORDER BY pull_request_id
                """,
                (user_id,)
            )
            return [
                PullRequestShort(
                    pull_request_id=row["pull_request_id"],
                    pull_request_name=row["pull_request_name"],
                    author_id=row["author_id"],
                    status=PullRequestStatus(row["status"])
                )
                for row in rows
            ]

        return await self._db.run(operation)

    async def get_reviewer_stats(self) -> List[ReviewerStat]:
        def operation(conn: sqlite3.Connection) -> List[ReviewerStat]:
            rows = conn.execute(
                """
                SELECT r.value AS user_id, COUNT(*) AS review_count
                FROM pull_requests AS p, json_each(p.assigned_reviewers) AS r
                GROUP BY r.value
                ORDER BY r.value
                """
            )
            return [
                ReviewerStat(user_id=row["user_id"], review_count=row["review_count"])
                for row in rows
            ]

        return await self._db.run(operation)
