"""
Reviewer Assignment Engine

This module holds the policy for pull request creation, merge and
reviewer reassignment.

Design Decisions:
- Stateless orchestrator: all state lives in the injected directories
- First-fit selection over the order returned by the user directory,
  no randomisation and no load balancing
- Uniqueness is left to the pull request store, never pre-checked here
- No retries and no background work; cancellation of the calling task
  cancels the directory call in flight
"""

from typing import List, Tuple

from app.errors import (
    NoCandidateError,
    NotAssignedError,
    NotFoundError,
    PullRequestExistsError,
    PullRequestMergedError,
)
from app.logging_config import get_logger
from app.models import MAX_REVIEWERS, PullRequest, PullRequestStatus, User
from app.services.base import Clock, storage_errors, utc_now
from app.storage.base import PullRequestStore, TeamDirectory, UserDirectory

logger = get_logger(__name__)


def pick_reviewers(candidates: List[User], excluded: List[str], limit: int) -> List[str]:
    """
    First-fit selection of reviewer ids.

    Args:
        candidates: Users in directory order
        excluded: Ids that may not be picked
        limit: Maximum number of ids to return

    Returns:
        Up to ``limit`` ids, in candidate order
    """
    picked: List[str] = []
    for user in candidates:
        if len(picked) == limit:
            break
        if user.user_id in excluded or user.user_id in picked:
            continue
        picked.append(user.user_id)
    return picked


class AssignmentEngine:
    """
    Creates, merges and reassigns reviewers on pull requests.

    Usage:
        engine = AssignmentEngine(users, teams, pull_requests)
        pr = await engine.create("pr-1", "Add search", "u1")
        pr, new_reviewer = await engine.reassign("pr-1", "u2")
        pr = await engine.merge("pr-1")
    """

    def __init__(
        self,
        users: UserDirectory,
        teams: TeamDirectory,
        pull_requests: PullRequestStore,
        clock: Clock = utc_now
    ):
        """
        Initialize the engine.

        Args:
            users: User directory
            teams: Team directory
            pull_requests: Pull request store
            clock: Source of the current UTC time
        """
        self.users = users
        self.teams = teams
        self.pull_requests = pull_requests
        self._clock = clock

    async def create(self, pr_id: str, pr_name: str, author_id: str) -> PullRequest:
        """
        Create an OPEN pull request with up to two reviewers from the author's team.

        Args:
            pr_id: New pull request id
            pr_name: Pull request title
            author_id: Id of the author

        Returns:
            The stored pull request

        Raises:
            NotFoundError: Author or author's team does not exist
            PullRequestExistsError: A pull request with this id already exists
        """
        with storage_errors("users.get_by_id", not_found=NotFoundError(f"author not found: {author_id}")):
            author = await self.users.get_by_id(author_id)

        with storage_errors(
            "teams.get_by_name",
            not_found=NotFoundError(f"team not found: {author.team_name}")
        ):
            await self.teams.get_by_name(author.team_name)

        with storage_errors("users.list_by_team"):
            members = await self.users.list_by_team(author.team_name, only_active=True)

        reviewers = pick_reviewers(members, excluded=[author_id], limit=MAX_REVIEWERS)

        pr = PullRequest(
            pull_request_id=pr_id,
            pull_request_name=pr_name,
            author_id=author_id,
            status=PullRequestStatus.OPEN,
            assigned_reviewers=reviewers,
            created_at=self._clock(),
            merged_at=None
        )

        with storage_errors(
            "pull_requests.create",
            already_exists=PullRequestExistsError(f"pull request already exists: {pr_id}")
        ):
            await self.pull_requests.create(pr)

        logger.info(
            "Pull request created",
            pr_id=pr_id,
            author_id=author_id,
            team_name=author.team_name,
            reviewers=reviewers
        )
        return pr

    async def merge(self, pr_id: str) -> PullRequest:
        """
        Mark a pull request as MERGED. Repeated calls return the same state.

        Args:
            pr_id: Pull request id

        Returns:
            The merged pull request as stored

        Raises:
            NotFoundError: The pull request does not exist or vanished before the update
        """
        pr = await self._get_pull_request(pr_id)

        if pr.is_merged:
            if pr.merged_at is not None:
                logger.debug("Pull request already merged", pr_id=pr_id)
                return pr

            logger.warning("Backfilling missing merge timestamp", pr_id=pr_id)
            pr = pr.model_copy(update={"merged_at": self._clock()})
        else:
            pr = pr.model_copy(update={
                "status": PullRequestStatus.MERGED,
                "merged_at": self._clock()
            })

        await self._save(pr)

        # The store keeps the first merged_at it sees; return what it holds.
        merged = await self._get_pull_request(pr_id)
        logger.info("Pull request merged", pr_id=pr_id, merged_at=merged.merged_at)
        return merged

    async def reassign(self, pr_id: str, old_user_id: str) -> Tuple[PullRequest, str]:
        """
        Replace one reviewer with an active member of that reviewer's team.

        Args:
            pr_id: Pull request id
            old_user_id: Reviewer to replace

        Returns:
            Tuple of (updated pull request, id of the new reviewer)

        Raises:
            NotFoundError: Pull request or old reviewer does not exist
            PullRequestMergedError: The pull request is already merged
            NotAssignedError: old_user_id is not a current reviewer
            NoCandidateError: No eligible replacement exists
        """
        pr = await self._get_pull_request(pr_id)

        if pr.is_merged:
            raise PullRequestMergedError("cannot reassign reviewers on merged PR")

        if old_user_id not in pr.assigned_reviewers:
            raise NotAssignedError("user is not assigned as reviewer on this PR")

        with storage_errors(
            "users.get_by_id",
            not_found=NotFoundError(f"reviewer not found: {old_user_id}")
        ):
            old_reviewer = await self.users.get_by_id(old_user_id)

        with storage_errors("users.list_by_team"):
            members = await self.users.list_by_team(old_reviewer.team_name, only_active=True)

        excluded = [old_user_id, pr.author_id] + pr.assigned_reviewers
        picked = pick_reviewers(members, excluded=excluded, limit=1)
        if not picked:
            logger.info(
                "No replacement reviewer available",
                pr_id=pr_id,
                old_user_id=old_user_id,
                team_name=old_reviewer.team_name
            )
            raise NoCandidateError("no active replacement candidate in team")

        new_user_id = picked[0]
        reviewers = list(pr.assigned_reviewers)
        reviewers[reviewers.index(old_user_id)] = new_user_id
        pr = pr.model_copy(update={"assigned_reviewers": reviewers})

        await self._save(pr)

        logger.info(
            "Reviewer reassigned",
            pr_id=pr_id,
            old_user_id=old_user_id,
            new_user_id=new_user_id,
            reviewers=reviewers
        )
        return pr, new_user_id

    async def _get_pull_request(self, pr_id: str) -> PullRequest:
        with storage_errors(
            "pull_requests.get_by_id",
            not_found=NotFoundError(f"pull request not found: {pr_id}")
        ):
            return await self.pull_requests.get_by_id(pr_id)

    async def _save(self, pr: PullRequest) -> None:
        with storage_errors(
            "pull_requests.update",
            not_found=NotFoundError(f"pull request not found on update: {pr.pull_request_id}")
        ):
            await self.pull_requests.update(pr)
