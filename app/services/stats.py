"""
Reviewer Statistics Service
"""

from typing import List

from app.models import ReviewerStat
from app.services.base import storage_errors
from app.storage.base import PullRequestStore


class StatsService:
    """Read-only workload figures, recomputed on every call."""

    def __init__(self, pull_requests: PullRequestStore):
        self.pull_requests = pull_requests

    async def get_reviewer_stats(self) -> List[ReviewerStat]:
        """Count pull requests (open and merged) per assigned reviewer, ordered by user id."""
        with storage_errors("pull_requests.get_reviewer_stats"):
            return await self.pull_requests.get_reviewer_stats()
