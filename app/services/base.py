"""
Service Helpers

Shared plumbing for the services: the UTC clock and translation of
directory exceptions into domain errors.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterator, Optional

from app.errors import DomainError, ServiceError
from app.storage.base import RecordAlreadyExists, RecordNotFound, StorageError

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


@contextmanager
def storage_errors(
    operation: str,
    not_found: Optional[DomainError] = None,
    already_exists: Optional[DomainError] = None
) -> Iterator[None]:
    """
    Translate directory exceptions raised inside the block.

    Known conditions become the given domain errors. Everything else,
    including a known condition with no mapping, is wrapped in
    ServiceError with the operation name.

    Usage:
        with storage_errors("users.get_by_id", not_found=NotFoundError("user not found: u1")):
            user = await users.get_by_id("u1")

    Args:
        operation: Directory call, used as error context
        not_found: Raised when the directory reports RecordNotFound
        already_exists: Raised when the directory reports RecordAlreadyExists
    """
    try:
        yield
    except RecordNotFound as e:
        if not_found is None:
            raise ServiceError(f"{operation}: {e}") from e
        raise not_found from e
    except RecordAlreadyExists as e:
        if already_exists is None:
            raise ServiceError(f"{operation}: {e}") from e
        raise already_exists from e
    except StorageError as e:
        raise ServiceError(f"{operation}: {e}") from e
