"""API router modules."""

from fastapi import APIRouter

from guidebook.core.config import get_settings

from .rate_limit import parse_rate, rate_dependency
from .v1 import router as api_v1_router

settings = get_settings()

_DEFAULT_RATE_DEP = rate_dependency(parse_rate(settings.rate_limit_default, fallback=(100, 60)))

api_router = APIRouter()
api_router.include_router(
    api_v1_router, prefix=settings.api_prefix, dependencies=[_DEFAULT_RATE_DEP]
)

__all__ = ["api_router"]
