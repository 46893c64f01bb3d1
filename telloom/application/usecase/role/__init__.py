"""Role use cases."""

from telloom.application.usecase.role.diagnose_roles import (
    DiagnoseRolesRequest,
    DiagnoseRolesResponse,
    DiagnoseRolesUseCase,
)
from telloom.application.usecase.role.get_route import GetRouteRequest, GetRouteUseCase
from telloom.application.usecase.role.select_role import (
    RouteResponse,
    SelectRoleRequest,
    SelectRoleUseCase,
)

__all__ = [
    "DiagnoseRolesRequest",
    "DiagnoseRolesResponse",
    "DiagnoseRolesUseCase",
    "GetRouteRequest",
    "GetRouteUseCase",
    "RouteResponse",
    "SelectRoleRequest",
    "SelectRoleUseCase",
]
