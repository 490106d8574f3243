"""
FastAPI dependencies resolving the services attached to the application.
"""

from fastapi import Request

from app.services import AssignmentEngine, Services, StatsService, TeamService, UserService


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_assignment_engine(request: Request) -> AssignmentEngine:
    return get_services(request).assignment


def get_team_service(request: Request) -> TeamService:
    return get_services(request).teams


def get_user_service(request: Request) -> UserService:
    return get_services(request).users


def get_stats_service(request: Request) -> StatsService:
    return get_services(request).stats
