"""
Data Models Module

This module defines all Pydantic models used throughout the application.
Strong typing ensures data integrity and provides clear contracts between components.

Design Decisions:
- Use Pydantic models for domain records and for API transfer objects
- Pull request status is an explicit enum, never a free-form string
- Reviewer-set invariants are enforced when a PullRequest is constructed
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


MAX_REVIEWERS = 2


# =============================================================================
# Enums
# =============================================================================

class PullRequestStatus(str, Enum):
    """Lifecycle states of a pull request. MERGED is terminal."""
    OPEN = "OPEN"
    MERGED = "MERGED"


# =============================================================================
# Domain Models
# =============================================================================

class User(BaseModel):
    """A team member who can author or review pull requests."""
    user_id: str
    username: str
    team_name: str
    is_active: bool = True


class TeamMember(BaseModel):
    """Member record as supplied when a team is created."""
    user_id: str = Field(min_length=1)
    username: str = Field(min_length=1)
    is_active: bool = False


class Team(BaseModel):
    """
    A named team with its members.

    Membership is authoritative via User.team_name; directories build
    the member list from the users tagged with this team.
    """
    team_name: str
    members: List[TeamMember] = []


class PullRequest(BaseModel):
    """
    A pull request with its assigned reviewers.

    Attributes:
        pull_request_id: Unique identifier
        pull_request_name: Human readable title
        author_id: User who opened the pull request
        status: OPEN or MERGED
        assigned_reviewers: Ordered reviewer ids, at most two, never the author
        created_at: Set once at creation
        merged_at: Set the first time the pull request is merged
    """
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus = PullRequestStatus.OPEN
    assigned_reviewers: List[str] = Field(default=[], max_length=MAX_REVIEWERS)
    created_at: Optional[datetime] = None
    merged_at: Optional[datetime] = None

    @field_validator("assigned_reviewers")
    @classmethod
    def validate_distinct_reviewers(cls, v: List[str]) -> List[str]:
        """Reject duplicate reviewer ids."""
        if len(set(v)) != len(v):
            raise ValueError(f"Duplicate reviewers: {v}")
        return v

    @model_validator(mode="after")
    def validate_author_not_reviewer(self) -> "PullRequest":
        """The author can never review their own pull request."""
        if self.author_id in self.assigned_reviewers:
            raise ValueError(f"Author {self.author_id} cannot be a reviewer")
        return self

    @property
    def is_merged(self) -> bool:
        """Check if the pull request reached the terminal state."""
        return self.status == PullRequestStatus.MERGED

    def to_short(self) -> "PullRequestShort":
        """Get the summary form used in reviewer listings."""
        return PullRequestShort(
            pull_request_id=self.pull_request_id,
            pull_request_name=self.pull_request_name,
            author_id=self.author_id,
            status=self.status
        )


class PullRequestShort(BaseModel):
    """Summary of a pull request without reviewers or timestamps."""
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus


class ReviewerStat(BaseModel):
    """Number of pull requests (open or merged) a user is assigned to review."""
    user_id: str
    review_count: int = Field(ge=0)


# =============================================================================
# API Request Models
# =============================================================================

class TeamAddRequest(BaseModel):
    """Body of POST /team/add."""
    team_name: str = Field(min_length=1)
    members: List[TeamMember]


class TeamDeactivateRequest(BaseModel):
    """Body of POST /team/deactivateMembers."""
    team_name: str = Field(min_length=1)


class UserSetIsActiveRequest(BaseModel):
    """Body of POST /users/setIsActive."""
    user_id: str = Field(min_length=1)
    is_active: bool


class PullRequestCreateRequest(BaseModel):
    """Body of POST /pullRequest/create."""
    pull_request_id: str = Field(min_length=1)
    pull_request_name: str = Field(min_length=1)
    author_id: str = Field(min_length=1)


class PullRequestMergeRequest(BaseModel):
    """Body of POST /pullRequest/merge."""
    pull_request_id: str = Field(min_length=1)


class PullRequestReassignRequest(BaseModel):
    """Body of POST /pullRequest/reassign."""
    pull_request_id: str = Field(min_length=1)
    old_user_id: str = Field(min_length=1)


# =============================================================================
# API Response Models
# =============================================================================

class ErrorBody(BaseModel):
    """Machine-readable error code plus human message."""
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Envelope for every error returned by the API."""
    error: ErrorBody


class TeamResponse(BaseModel):
    """Envelope for a single team."""
    team: Team


class UserResponse(BaseModel):
    """Envelope for a single user."""
    user: User


class UserReviewResponse(BaseModel):
    """Pull requests a user is assigned to review."""
    user_id: str
    pull_requests: List[PullRequestShort]


class PullRequestView(BaseModel):
    """
    Wire representation of a pull request.

    Timestamps are serialized as createdAt / mergedAt and omitted when unset.
    """
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus
    assigned_reviewers: List[str]
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")
    merged_at: Optional[datetime] = Field(default=None, serialization_alias="mergedAt")

    @classmethod
    def from_domain(cls, pr: PullRequest) -> "PullRequestView":
        """Build the wire form of a domain pull request."""
        return cls(
            pull_request_id=pr.pull_request_id,
            pull_request_name=pr.pull_request_name,
            author_id=pr.author_id,
            status=pr.status,
            assigned_reviewers=list(pr.assigned_reviewers),
            created_at=pr.created_at,
            merged_at=pr.merged_at
        )


class PullRequestResponse(BaseModel):
    """Envelope for create and merge responses."""
    pr: PullRequestView


class PullRequestReassignResponse(BaseModel):
    """Envelope for reassign responses, carrying the chosen replacement."""
    pr: PullRequestView
    replaced_by: str


class ReviewerStatsResponse(BaseModel):
    """Review counts per reviewer, ordered by user id."""
    items: List[ReviewerStat]
