"""Select role use case."""

from pydantic import BaseModel

from telloom.domain.model import Principal
from telloom.domain.service import RoleRouter, RoleService
from telloom.domain.value import Role, Route


class SelectRoleRequest(BaseModel):
    """Select role request."""

    principal: Principal
    role: Role


class RouteResponse(BaseModel):
    """Held roles and the landing route they lead to."""

    roles: list[Role]
    route: Route


class SelectRoleUseCase:
    """Use case for self-service role selection during onboarding."""

    def __init__(self, role_service: RoleService, role_router: RoleRouter) -> None:
        """Initialize select role use case.

        Args:
            role_service: Role domain service
            role_router: Landing route selection
        """
        self.role_service = role_service
        self.role_router = role_router

    async def execute(self, request: SelectRoleRequest) -> RouteResponse:
        """Take on a role and route to its landing page.

        Raises:
            BusinessRuleViolationError: If the role is not self-service
            ProvisioningError: If the role rows could not be written
        """
        await self.role_service.select_role(request.principal, request.role)

        roles = await self.role_service.held_roles(request.principal)
        # The role just selected is the one to land in
        return RouteResponse(
            roles=sorted(roles, key=lambda r: r.value),
            route=self.role_router.route_for_context(roles, request.role),
        )
