"""Liveness endpoint."""

from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from telloom.config import Settings

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Liveness report."""

    status: str
    checked_at: datetime
    git_sha: str
    environment: str


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: FromDishka[Settings]) -> HealthResponse:
    """Report that the process is serving.

    The authority store is not queried: when it is down, access answers
    degrade to conservative denials rather than errors, so the service
    stays live.
    """
    return HealthResponse(
        status="healthy",
        checked_at=datetime.now(timezone.utc),
        git_sha=settings.git_sha,
        environment=settings.environment,
    )
