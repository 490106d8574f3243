"""
API Package

This package contains the HTTP surface of the service:
- pull_requests: create, merge and reassign endpoints
- teams: team creation, lookup and member deactivation
- users: activity toggling and review queues
- stats: reviewer workload statistics
- errors: mapping of domain errors onto HTTP responses
"""

from fastapi import APIRouter

from app.api.errors import register_exception_handlers
from app.api.pull_requests import router as pull_requests_router
from app.api.stats import router as stats_router
from app.api.teams import router as teams_router
from app.api.users import router as users_router

router = APIRouter()
router.include_router(teams_router)
router.include_router(users_router)
router.include_router(pull_requests_router)
router.include_router(stats_router)

__all__ = ["router", "register_exception_handlers"]
