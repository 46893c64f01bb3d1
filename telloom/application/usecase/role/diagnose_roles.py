"""Diagnose roles use case."""

from pydantic import BaseModel

from telloom.domain.model import Principal
from telloom.domain.service import RoleService
from telloom.domain.value import Role


class DiagnoseRolesRequest(BaseModel):
    """Diagnose roles request."""

    principal: Principal
    repair: bool = False


class DiagnoseRolesResponse(BaseModel):
    """Diagnose roles response."""

    store_roles: list[Role]
    claims_roles: list[Role]
    claims_stale: bool  # Session should be refreshed
    missing_relationships: list[Role]
    repaired: list[Role]


class DiagnoseRolesUseCase:
    """Use case for reporting (and optionally repairing) role drift."""

    def __init__(self, role_service: RoleService) -> None:
        """Initialize diagnose roles use case.

        Args:
            role_service: Role domain service
        """
        self.role_service = role_service

    async def execute(self, request: DiagnoseRolesRequest) -> DiagnoseRolesResponse:
        """Diagnose the principal's roles.

        Raises:
            AuthorityUnavailableError: If the store could not be read
        """
        diagnosis = await self.role_service.diagnose(
            request.principal, repair=request.repair
        )

        def ordered(roles) -> list[Role]:
            return sorted(roles, key=lambda r: r.value)

        return DiagnoseRolesResponse(
            store_roles=ordered(diagnosis.store_roles),
            claims_roles=ordered(diagnosis.claims_roles),
            claims_stale=diagnosis.claims_stale,
            missing_relationships=list(diagnosis.missing_relationships),
            repaired=list(diagnosis.repaired),
        )
