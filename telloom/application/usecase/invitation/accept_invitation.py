"""Accept invitation use case."""

from typing import Optional

import logfire
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from telloom.application.usecase.base import BaseUseCase
from telloom.domain.model import AcceptanceResult, Principal
from telloom.domain.service import (
    InvitationProvisioner,
    InvitationService,
    RoleRouter,
    RoleService,
)
from telloom.domain.value import AcceptanceRejection, InvitationToken, Role, Route


class AcceptInvitationRequest(BaseModel):
    """Accept invitation request."""

    principal: Principal
    token: str


class AcceptInvitationResponse(BaseModel):
    """Accept invitation response."""

    accepted: bool
    reason: Optional[AcceptanceRejection] = None
    partition_id: Optional[str] = None
    role: Optional[Role] = None
    incomplete_steps: list[str] = []
    route: Optional[Route] = None  # Where to send the principal next


class AcceptInvitationUseCase(
    BaseUseCase[AcceptInvitationRequest, AcceptInvitationResponse]
):
    """Use case for accepting an invitation during signup."""

    def __init__(
        self,
        invitation_service: InvitationService,
        invitation_provisioner: InvitationProvisioner,
        role_service: RoleService,
        role_router: RoleRouter,
    ) -> None:
        """Initialize accept invitation use case.

        Args:
            invitation_service: Invitation domain service
            invitation_provisioner: Acceptance provisioning
            role_service: Role domain service
            role_router: Landing route selection
        """
        self.invitation_service = invitation_service
        self.invitation_provisioner = invitation_provisioner
        self.role_service = role_service
        self.role_router = role_router

    async def execute(self, request: AcceptInvitationRequest) -> AcceptInvitationResponse:
        """Accept an invitation.

        Args:
            request: Principal and invitation token

        Returns:
            Acceptance outcome; denials are returned, not raised

        Raises:
            AuthorityUnavailableError: If the invitation could not be re-read
            ProvisioningError: If the primary delegation could not be written
        """
        with logfire.span(
            "accept_invitation.execute",
            principal_id=str(request.principal.id),
            token=request.token[:8] + "...",
        ):
            try:
                token = InvitationToken(root=request.token)
            except PydanticValidationError:
                return self._to_response(
                    AcceptanceResult.denied(AcceptanceRejection.INVITATION_NOT_FOUND)
                )

            invitation = await self.invitation_service.find_by_token(token)
            if not invitation:
                return self._to_response(
                    AcceptanceResult.denied(AcceptanceRejection.INVITATION_NOT_FOUND)
                )

            result = await self.invitation_provisioner.accept_invitation(
                invitation, request.principal
            )
            if not result.accepted:
                return self._to_response(result)

            roles = await self.role_service.held_roles(request.principal)
            return self._to_response(result, self.role_router.route_for(roles))

    @staticmethod
    def _to_response(
        result: AcceptanceResult, route: Optional[Route] = None
    ) -> AcceptInvitationResponse:
        return AcceptInvitationResponse(
            accepted=result.accepted,
            reason=result.reason,
            partition_id=str(result.partition_id) if result.partition_id else None,
            role=result.role,
            incomplete_steps=list(result.incomplete_steps),
            route=route,
        )
