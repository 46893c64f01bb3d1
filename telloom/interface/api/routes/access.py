"""Access routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header, Query

from telloom.application.usecase.access import (
    CheckAccessRequest,
    CheckAccessResponse,
    CheckAccessUseCase,
    ResolveContextRequest,
    ResolveContextResponse,
    ResolveContextUseCase,
)
from telloom.domain.service import JWTService
from telloom.domain.value import Role
from telloom.interface.api.auth import authenticate

router = APIRouter(prefix="/access", tags=["access"], route_class=DishkaRoute)


@router.get("/context", response_model=ResolveContextResponse)
async def resolve_context(
    resolve_context_use_case: FromDishka[ResolveContextUseCase],
    jwt_service: FromDishka[JWTService],
    sharer_id: UUID | None = Query(default=None),
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
    active_role: Role | None = Header(default=None, alias="X-Active-Role"),
) -> ResolveContextResponse:
    """Resolve the caller's effective partition and landing route.

    Args:
        resolve_context_use_case: Resolve context use case from DI
        jwt_service: JWT service from DI
        sharer_id: Partition the caller would like to act on
        auth_token: JWT token from cookie
        authorization: Bearer token header
        active_role: Role the caller wants to act in

    Returns:
        Effective partition (null routes to onboarding) and landing route
    """
    principal = authenticate(jwt_service, auth_token, authorization, active_role)
    return await resolve_context_use_case.execute(
        ResolveContextRequest(principal=principal, sharer_id=sharer_id)
    )


@router.get("/partitions/{sharer_id}", response_model=CheckAccessResponse)
async def check_access(
    sharer_id: UUID,
    check_access_use_case: FromDishka[CheckAccessUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> CheckAccessResponse:
    """Check whether the caller may access a partition.

    A denial is a normal answer (has_access false), not an error.
    """
    principal = authenticate(jwt_service, auth_token, authorization)
    return await check_access_use_case.execute(
        CheckAccessRequest(principal=principal, sharer_id=sharer_id)
    )
