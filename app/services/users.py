"""
User Service

Activation toggling and the per-user review queue.
"""

from typing import List, Tuple

from app.errors import NotFoundError
from app.logging_config import get_logger
from app.models import PullRequestShort, User
from app.services.base import storage_errors
from app.storage.base import PullRequestStore, UserDirectory

logger = get_logger(__name__)


class UserService:
    """Operations on individual users."""

    def __init__(self, users: UserDirectory, pull_requests: PullRequestStore):
        self.users = users
        self.pull_requests = pull_requests

    async def set_is_active(self, user_id: str, is_active: bool) -> User:
        """
        Set a user's active flag.

        Raises:
            NotFoundError: The user does not exist
        """
        with storage_errors("users.set_active", not_found=NotFoundError(f"user not found: {user_id}")):
            user = await self.users.set_active(user_id, is_active)

        logger.info("User activity changed", user_id=user_id, is_active=is_active)
        return user

    async def get_review(self, user_id: str) -> Tuple[str, List[PullRequestShort]]:
        """
        List pull requests where the user is an assigned reviewer.

        Returns:
            Tuple of (user id, pull requests ordered by id)

        Raises:
            NotFoundError: The user does not exist
        """
        with storage_errors("users.get_by_id", not_found=NotFoundError(f"user not found: {user_id}")):
            await self.users.get_by_id(user_id)

        with storage_errors("pull_requests.list_by_reviewer"):
            prs = await self.pull_requests.list_by_reviewer(user_id)

        return user_id, prs
