"""
Statistics Endpoints
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_stats_service
from app.models import ReviewerStatsResponse
from app.services import StatsService

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/reviewers", response_model=ReviewerStatsResponse)
async def get_reviewer_stats(
    stats: StatsService = Depends(get_stats_service)
) -> ReviewerStatsResponse:
    """Number of pull requests each reviewer is assigned to, ordered by user id."""
    return ReviewerStatsResponse(items=await stats.get_reviewer_stats())
