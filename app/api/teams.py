"""
Team Endpoints

/team/add, /team/get and /team/deactivateMembers.
"""

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_team_service
from app.models import Team, TeamAddRequest, TeamDeactivateRequest, TeamResponse
from app.services import TeamService

router = APIRouter(prefix="/team", tags=["teams"])


@router.post("/add", status_code=status.HTTP_201_CREATED, response_model=TeamResponse)
async def add_team(
    body: TeamAddRequest,
    teams: TeamService = Depends(get_team_service)
) -> TeamResponse:
    """Create a team and its members."""
    team = await teams.add(body.team_name, body.members)
    return TeamResponse(team=team)


@router.get("/get", response_model=Team)
async def get_team(
    team_name: str = Query(min_length=1),
    teams: TeamService = Depends(get_team_service)
) -> Team:
    """Get a team with its members."""
    return await teams.get(team_name)


@router.post("/deactivateMembers", response_model=TeamResponse)
async def deactivate_team_members(
    body: TeamDeactivateRequest,
    teams: TeamService = Depends(get_team_service)
) -> TeamResponse:
    """Mark every member of a team inactive."""
    team = await teams.deactivate_members(body.team_name)
    return TeamResponse(team=team)
