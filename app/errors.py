"""
Domain Errors Module

Caller-facing error kinds raised by the services. Each carries a stable
machine-readable code and a human message. Infrastructure failures are
wrapped in ServiceError and carry no stable code.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes exposed to API clients."""
    NOT_FOUND = "NOT_FOUND"
    TEAM_EXISTS = "TEAM_EXISTS"
    PR_EXISTS = "PR_EXISTS"
    PR_MERGED = "PR_MERGED"
    NOT_ASSIGNED = "NOT_ASSIGNED"
    NO_CANDIDATE = "NO_CANDIDATE"


class DomainError(Exception):
    """Base class for expected, caller-facing failures."""

    code: ErrorCode

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """A referenced entity does not exist."""
    code = ErrorCode.NOT_FOUND


class TeamExistsError(DomainError):
    """A team with the same name already exists."""
    code = ErrorCode.TEAM_EXISTS


class PullRequestExistsError(DomainError):
    """A pull request with the same id already exists."""
    code = ErrorCode.PR_EXISTS


class PullRequestMergedError(DomainError):
    """Mutation attempted on a merged pull request."""
    code = ErrorCode.PR_MERGED


class NotAssignedError(DomainError):
    """The user is not a current reviewer of the pull request."""
    code = ErrorCode.NOT_ASSIGNED


class NoCandidateError(DomainError):
    """No eligible replacement reviewer is available."""
    code = ErrorCode.NO_CANDIDATE


class ServiceError(Exception):
    """Unexpected failure from a directory, wrapped with operation context."""
    pass
