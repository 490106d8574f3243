"""
Pull Request Endpoints

/pullRequest/create, /pullRequest/merge and /pullRequest/reassign.
"""

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_assignment_engine
from app.models import (
    PullRequestCreateRequest,
    PullRequestMergeRequest,
    PullRequestReassignRequest,
    PullRequestReassignResponse,
    PullRequestResponse,
    PullRequestView,
)
from app.services import AssignmentEngine

router = APIRouter(prefix="/pullRequest", tags=["pull requests"])


@router.post(
    "/create",
    status_code=status.HTTP_201_CREATED,
    response_model=PullRequestResponse,
    response_model_exclude_none=True
)
async def create_pull_request(
    body: PullRequestCreateRequest,
    engine: AssignmentEngine = Depends(get_assignment_engine)
) -> PullRequestResponse:
    """Create a pull request and assign up to two reviewers from the author's team."""
    pr = await engine.create(body.pull_request_id, body.pull_request_name, body.author_id)
    return PullRequestResponse(pr=PullRequestView.from_domain(pr))


@router.post(
    "/merge",
    response_model=PullRequestResponse,
    response_model_exclude_none=True
)
async def merge_pull_request(
    body: PullRequestMergeRequest,
    engine: AssignmentEngine = Depends(get_assignment_engine)
) -> PullRequestResponse:
    """Mark a pull request as merged. Safe to repeat."""
    pr = await engine.merge(body.pull_request_id)
    return PullRequestResponse(pr=PullRequestView.from_domain(pr))


@router.post(
    "/reassign",
    response_model=PullRequestReassignResponse,
    response_model_exclude_none=True
)
async def reassign_reviewer(
    body: PullRequestReassignRequest,
    engine: AssignmentEngine = Depends(get_assignment_engine)
) -> PullRequestReassignResponse:
    """Replace one reviewer with another active member of the reviewer's team."""
    pr, replaced_by = await engine.reassign(body.pull_request_id, body.old_user_id)
    return PullRequestReassignResponse(
        pr=PullRequestView.from_domain(pr),
        replaced_by=replaced_by
    )
