"""
Team Service

Team creation, lookup and bulk deactivation of a team's members.
Team creation is the only path that creates users.
"""

from typing import List

from app.errors import NotFoundError, ServiceError, TeamExistsError
from app.logging_config import get_logger
from app.models import Team, TeamMember, User
from app.services.base import storage_errors
from app.storage.base import RecordNotFound, StorageError, TeamDirectory, UserDirectory

logger = get_logger(__name__)


class TeamService:
    """Operations on teams and their members."""

    def __init__(self, users: UserDirectory, teams: TeamDirectory):
        self.users = users
        self.teams = teams

    async def add(self, team_name: str, members: List[TeamMember]) -> Team:
        """
        Create a team and upsert every member as a user of that team.

        The team and its users are written separately; if the upsert fails
        the team stays, empty, and a retry reports TEAM_EXISTS.

        Args:
            team_name: Unique team name
            members: Members in the order supplied by the caller

        Returns:
            The created team

        Raises:
            TeamExistsError: A team with this name already exists
        """
        team = Team(team_name=team_name, members=members)

        with storage_errors(
            "teams.create",
            already_exists=TeamExistsError(f"team {team_name} already exists")
        ):
            await self.teams.create(team)

        users = [
            User(
                user_id=m.user_id,
                username=m.username,
                team_name=team_name,
                is_active=m.is_active
            )
            for m in members
        ]
        with storage_errors("users.bulk_upsert"):
            await self.users.bulk_upsert(users)

        logger.info("Team created", team_name=team_name, num_members=len(members))
        return team

    async def get(self, team_name: str) -> Team:
        """Return a team with its current members, or raise NotFoundError."""
        with storage_errors("teams.get_by_name", not_found=NotFoundError(f"team not found: {team_name}")):
            return await self.teams.get_by_name(team_name)

    async def deactivate_members(self, team_name: str) -> Team:
        """
        Mark every member of a team inactive.

        Members that no longer exist as users are skipped. Any other
        directory failure stops the walk and propagates.

        Returns:
            The team as it reads after deactivation
        """
        team = await self.get(team_name)

        deactivated = []
        for member in team.members:
            try:
                await self.users.set_active(member.user_id, False)
            except RecordNotFound:
                logger.debug("Skipping missing member", team_name=team_name, user_id=member.user_id)
                continue
            except StorageError as e:
                raise ServiceError(f"users.set_active: {e}") from e
            deactivated.append(member.user_id)

        logger.info("Team members deactivated", team_name=team_name, user_ids=deactivated)
        return await self.get(team_name)
