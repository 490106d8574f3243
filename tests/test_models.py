"""
Tests for Data Models

Tests for the Pydantic models used in the application.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from app.errors import ErrorCode, NoCandidateError, NotFoundError
from app.models import (
    PullRequest,
    PullRequestShort,
    PullRequestStatus,
    PullRequestView,
    ReviewerStat,
    TeamAddRequest,
    TeamMember,
)


class TestPullRequest:
    """Tests for the PullRequest domain model."""

    def test_defaults(self):
        """Test a new pull request is open with no reviewers."""
        pr = PullRequest(pull_request_id="pr-1", pull_request_name="x", author_id="u1")

        assert pr.status == PullRequestStatus.OPEN
        assert pr.assigned_reviewers == []
        assert pr.merged_at is None
        assert pr.is_merged is False

    def test_is_merged(self):
        pr = PullRequest(
            pull_request_id="pr-1",
            pull_request_name="x",
            author_id="u1",
            status=PullRequestStatus.MERGED
        )

        assert pr.is_merged is True

    def test_at_most_two_reviewers(self):
        with pytest.raises(ValidationError):
            PullRequest(
                pull_request_id="pr-1",
                pull_request_name="x",
                author_id="u1",
                assigned_reviewers=["u2", "u3", "u4"]
            )

    def test_duplicate_reviewers_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            PullRequest(
                pull_request_id="pr-1",
                pull_request_name="x",
                author_id="u1",
                assigned_reviewers=["u2", "u2"]
            )

        assert "Duplicate" in str(exc_info.value)

    def test_author_cannot_review(self):
        with pytest.raises(ValidationError) as exc_info:
            PullRequest(
                pull_request_id="pr-1",
                pull_request_name="x",
                author_id="u1",
                assigned_reviewers=["u1"]
            )

        assert "cannot be a reviewer" in str(exc_info.value)

    def test_status_from_string(self):
        """Test the status parses from its wire value."""
        pr = PullRequest(
            pull_request_id="pr-1",
            pull_request_name="x",
            author_id="u1",
            status="MERGED"
        )

        assert pr.status is PullRequestStatus.MERGED

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            PullRequest(pull_request_id="pr-1", pull_request_name="x", author_id="u1", status="CLOSED")

    def test_to_short(self):
        pr = PullRequest(
            pull_request_id="pr-1",
            pull_request_name="x",
            author_id="u1",
            assigned_reviewers=["u2"]
        )

        assert pr.to_short() == PullRequestShort(
            pull_request_id="pr-1",
            pull_request_name="x",
            author_id="u1",
            status=PullRequestStatus.OPEN
        )


class TestPullRequestView:
    """Tests for the wire form of a pull request."""

    def test_timestamp_aliases(self):
        """Test timestamps serialize as createdAt / mergedAt."""
        created = datetime(2025, 11, 1, 12, 0, tzinfo=timezone.utc)
        merged = datetime(2025, 11, 2, 8, 30, tzinfo=timezone.utc)
        pr = PullRequest(
            pull_request_id="pr-1",
            pull_request_name="x",
            author_id="u1",
            status=PullRequestStatus.MERGED,
            assigned_reviewers=["u2", "u3"],
            created_at=created,
            merged_at=merged
        )

        data = PullRequestView.from_domain(pr).model_dump(by_alias=True)

        assert data["createdAt"] == created
        assert data["mergedAt"] == merged
        assert "created_at" not in data
        assert data["assigned_reviewers"] == ["u2", "u3"]

    def test_unset_timestamps_omitted(self):
        pr = PullRequest(pull_request_id="pr-1", pull_request_name="x", author_id="u1")

        data = PullRequestView.from_domain(pr).model_dump(by_alias=True, exclude_none=True)

        assert "createdAt" not in data
        assert "mergedAt" not in data

    def test_view_does_not_share_reviewer_list(self):
        pr = PullRequest(
            pull_request_id="pr-1",
            pull_request_name="x",
            author_id="u1",
            assigned_reviewers=["u2"]
        )

        view = PullRequestView.from_domain(pr)
        view.assigned_reviewers.append("u3")

        assert pr.assigned_reviewers == ["u2"]


class TestRequestModels:
    """Tests for API request bodies."""

    def test_member_without_flag_is_inactive(self):
        body = TeamAddRequest(
            team_name="backend",
            members=[{"user_id": "u1", "username": "Alice"}]
        )

        assert body.members == [TeamMember(user_id="u1", username="Alice", is_active=False)]

    def test_empty_team_name_rejected(self):
        with pytest.raises(ValidationError):
            TeamAddRequest(team_name="", members=[])

    def test_empty_member_id_rejected(self):
        with pytest.raises(ValidationError):
            TeamMember(user_id="", username="Alice")

    def test_negative_review_count_rejected(self):
        with pytest.raises(ValidationError):
            ReviewerStat(user_id="u1", review_count=-1)


class TestDomainErrors:
    """Tests for domain error kinds."""

    def test_code_and_message(self):
        error = NotFoundError("user not found: u1")

        assert error.code == ErrorCode.NOT_FOUND
        assert error.message == "user not found: u1"
        assert str(error) == "NOT_FOUND: user not found: u1"

    def test_codes_are_wire_strings(self):
        assert NoCandidateError("none").code.value == "NO_CANDIDATE"
        assert ErrorCode.PR_MERGED == "PR_MERGED"
