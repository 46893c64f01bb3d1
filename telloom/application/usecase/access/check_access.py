"""Check access use case."""

from uuid import UUID

from pydantic import BaseModel

from telloom.domain.model import Principal
from telloom.domain.service import AccessGate
from telloom.domain.value import PartitionId


class CheckAccessRequest(BaseModel):
    """Check access request."""

    principal: Principal
    sharer_id: UUID


class CheckAccessResponse(BaseModel):
    """Check access response."""

    sharer_id: str
    has_access: bool


class CheckAccessUseCase:
    """Use case for checking a principal's access to a partition."""

    def __init__(self, access_gate: AccessGate) -> None:
        """Initialize check access use case.

        Args:
            access_gate: Access gate domain service
        """
        self.access_gate = access_gate

    async def execute(self, request: CheckAccessRequest) -> CheckAccessResponse:
        """Check access.

        Args:
            request: Principal and target partition

        Returns:
            Access decision
        """
        has_access = await self.access_gate.has_access(
            request.principal, PartitionId(request.sharer_id)
        )
        return CheckAccessResponse(sharer_id=str(request.sharer_id), has_access=has_access)
