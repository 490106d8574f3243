"""
User Endpoints

/users/setIsActive and /users/getReview.
"""

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_user_service
from app.models import UserResponse, UserReviewResponse, UserSetIsActiveRequest
from app.services import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/setIsActive", response_model=UserResponse)
async def set_is_active(
    body: UserSetIsActiveRequest,
    users: UserService = Depends(get_user_service)
) -> UserResponse:
    """Set a user's active flag."""
    user = await users.set_is_active(body.user_id, body.is_active)
    return UserResponse(user=user)


@router.get("/getReview", response_model=UserReviewResponse)
async def get_review(
    user_id: str = Query(min_length=1),
    users: UserService = Depends(get_user_service)
) -> UserReviewResponse:
    """List pull requests where the user is an assigned reviewer."""
    reviewer_id, prs = await users.get_review(user_id)
    return UserReviewResponse(user_id=reviewer_id, pull_requests=prs)
