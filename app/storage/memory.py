"""
In-Memory Directories

Process-local implementations of the directory interfaces. Used as the
default backend and as the fakes in the test suite.

Records are kept in insertion-ordered dicts, so listing order is the
order users were first added; an upsert keeps the original position.
"""

from collections import Counter
from typing import Dict, List

from app.models import PullRequest, PullRequestShort, ReviewerStat, Team, TeamMember, User
from app.storage.base import RecordAlreadyExists, RecordNotFound


class InMemoryUserDirectory:
    """User directory backed by a dict keyed by user id."""

    def __init__(self):
        self._users: Dict[str, User] = {}

    async def get_by_id(self, user_id: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise RecordNotFound(f"user {user_id}")
        return user.model_copy()

    async def list_by_team(self, team_name: str, only_active: bool) -> List[User]:
        return [
            user.model_copy()
            for user in self._users.values()
            if user.team_name == team_name and (user.is_active or not only_active)
        ]

    async def set_active(self, user_id: str, is_active: bool) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise RecordNotFound(f"user {user_id}")
        updated = user.model_copy(update={"is_active": is_active})
        self._users[user_id] = updated
        return updated.model_copy()

    async def bulk_upsert(self, users: List[User]) -> None:
        for user in users:
            self._users[user.user_id] = user.model_copy()


class InMemoryTeamDirectory:
    """
    Team directory that keeps team names and reads members from the user directory.
    """

    def __init__(self, users: InMemoryUserDirectory):
        self._users = users
        self._team_names: List[str] = []

    async def get_by_name(self, team_name: str) -> Team:
        if team_name not in self._team_names:
            raise RecordNotFound(f"team {team_name}")

        members = await self._users.list_by_team(team_name, only_active=False)
        return Team(
            team_name=team_name,
            members=[
                TeamMember(user_id=u.user_id, username=u.username, is_active=u.is_active)
                for u in sorted(members, key=lambda u: u.user_id)
            ]
        )

    async def create(self, team: Team) -> None:
        if team.team_name in self._team_names:
            raise RecordAlreadyExists(f"team {team.team_name}")
        self._team_names.append(team.team_name)


class InMemoryPullRequestStore:
    """Pull request store backed by a dict keyed by pull request id."""

    def __init__(self):
        self._prs: Dict[str, PullRequest] = {}

    async def create(self, pr: PullRequest) -> None:
        if pr.pull_request_id in self._prs:
            raise RecordAlreadyExists(f"pull request {pr.pull_request_id}")
        self._prs[pr.pull_request_id] = pr.model_copy(deep=True)

    async def get_by_id(self, pr_id: str) -> PullRequest:
        pr = self._prs.get(pr_id)
        if pr is None:
            raise RecordNotFound(f"pull request {pr_id}")
        return pr.model_copy(deep=True)

    async def update(self, pr: PullRequest) -> None:
        existing = self._prs.get(pr.pull_request_id)
        if existing is None:
            raise RecordNotFound(f"pull request {pr.pull_request_id}")
        # merged_at is written once
        merged_at = existing.merged_at or pr.merged_at
        self._prs[pr.pull_request_id] = pr.model_copy(deep=True, update={"merged_at": merged_at})

    async def list_by_reviewer(self, user_id: str) -> List[PullRequestShort]:
        return [
            self._prs[pr_id].to_short()
            for pr_id in sorted(self._prs)
            if user_id in self._prs[pr_id].assigned_reviewers
        ]

    async def get_reviewer_stats(self) -> List[ReviewerStat]:
        counts = Counter(
            reviewer
            for pr in self._prs.values()
            for reviewer in pr.assigned_reviewers
        )
        return [
            ReviewerStat(user_id=user_id, review_count=count)
            for user_id, count in sorted(counts.items())
        ]
