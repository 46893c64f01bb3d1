"""Role routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header, Query
from pydantic import BaseModel

from telloom.application.usecase.role import (
    DiagnoseRolesRequest,
    DiagnoseRolesResponse,
    DiagnoseRolesUseCase,
    GetRouteRequest,
    GetRouteUseCase,
    RouteResponse,
    SelectRoleRequest,
    SelectRoleUseCase,
)
from telloom.domain.service import JWTService
from telloom.domain.value import Role
from telloom.interface.api.auth import authenticate

router = APIRouter(prefix="/roles", tags=["roles"], route_class=DishkaRoute)


class SelectRoleAPIRequest(BaseModel):
    """API request for selecting a role."""

    role: Role


@router.post("/select", response_model=RouteResponse)
async def select_role(
    request: SelectRoleAPIRequest,
    select_role_use_case: FromDishka[SelectRoleUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> RouteResponse:
    """Take on SHARER or LISTENER during onboarding.

    Args:
        request: Role to take on
        select_role_use_case: Select role use case from DI
        jwt_service: JWT service from DI
        auth_token: JWT token from cookie
        authorization: Bearer token header

    Returns:
        Held roles and the landing route for the selected role
    """
    principal = authenticate(jwt_service, auth_token, authorization)
    return await select_role_use_case.execute(
        SelectRoleRequest(principal=principal, role=request.role)
    )


@router.get("/route", response_model=RouteResponse)
async def get_route(
    get_route_use_case: FromDishka[GetRouteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
    active_role: Role | None = Header(default=None, alias="X-Active-Role"),
) -> RouteResponse:
    """Landing route for the caller's held roles."""
    principal = authenticate(jwt_service, auth_token, authorization, active_role)
    return await get_route_use_case.execute(GetRouteRequest(principal=principal))


@router.get("/diagnostics", response_model=DiagnoseRolesResponse)
async def diagnose_roles(
    diagnose_roles_use_case: FromDishka[DiagnoseRolesUseCase],
    jwt_service: FromDishka[JWTService],
    repair: bool = Query(default=False),
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> DiagnoseRolesResponse:
    """Report drift between session claims, roles and relationship rows.

    With repair=true a missing owner record is recreated for a SHARER.
    """
    principal = authenticate(jwt_service, auth_token, authorization)
    return await diagnose_roles_use_case.execute(
        DiagnoseRolesRequest(principal=principal, repair=repair)
    )
