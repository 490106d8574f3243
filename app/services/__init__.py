"""
Services Package

This package contains all service modules for the reviewer assignment service:
- assignment: pull request creation, merge and reviewer reassignment
- teams: team creation, lookup and member deactivation
- users: activity toggling and review queues
- stats: reviewer workload statistics
"""

from dataclasses import dataclass

from app.services.assignment import AssignmentEngine
from app.services.base import Clock, utc_now
from app.services.stats import StatsService
from app.services.teams import TeamService
from app.services.users import UserService
from app.storage import Storage


@dataclass
class Services:
    """All services wired to one storage backend."""
    assignment: AssignmentEngine
    teams: TeamService
    users: UserService
    stats: StatsService


def build_services(storage: Storage, clock: Clock = utc_now) -> Services:
    """Wire every service to the given directories."""
    return Services(
        assignment=AssignmentEngine(storage.users, storage.teams, storage.pull_requests, clock=clock),
        teams=TeamService(storage.users, storage.teams),
        users=UserService(storage.users, storage.pull_requests),
        stats=StatsService(storage.pull_requests)
    )


__all__ = [
    "AssignmentEngine",
    "TeamService",
    "UserService",
    "StatsService",
    "Services",
    "build_services",
]
