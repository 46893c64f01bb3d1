"""Get landing route use case."""

from pydantic import BaseModel

from telloom.application.usecase.role.select_role import RouteResponse
from telloom.domain.model import Principal
from telloom.domain.service import RoleRouter, RoleService


class GetRouteRequest(BaseModel):
    """Get route request."""

    principal: Principal


class GetRouteUseCase:
    """Use case for picking the principal's landing route."""

    def __init__(self, role_service: RoleService, role_router: RoleRouter) -> None:
        """Initialize get route use case.

        Args:
            role_service: Role domain service
            role_router: Landing route selection
        """
        self.role_service = role_service
        self.role_router = role_router

    async def execute(self, request: GetRouteRequest) -> RouteResponse:
        """Pick the landing route.

        Honours the principal's active role when it is actually held.
        """
        roles = await self.role_service.held_roles(request.principal)
        return RouteResponse(
            roles=sorted(roles, key=lambda r: r.value),
            route=self.role_router.route_for_context(
                roles, request.principal.active_role
            ),
        )
