"""Decline and revoke invitation use cases."""

from uuid import UUID

from pydantic import BaseModel

from telloom.application.usecase.invitation.create_invitation import InvitationItem
from telloom.config import Settings
from telloom.domain.model import Principal
from telloom.domain.service import InvitationService
from telloom.domain.value import InvitationId


class InvitationActionRequest(BaseModel):
    """Request to act on an invitation by ID."""

    principal: Principal
    invitation_id: UUID


class DeclineInvitationUseCase:
    """Use case for an invitee declining an invitation."""

    def __init__(self, invitation_service: InvitationService, settings: Settings) -> None:
        """Initialize decline invitation use case.

        Args:
            invitation_service: Invitation domain service
            settings: Application settings
        """
        self.invitation_service = invitation_service
        self.settings = settings

    async def execute(self, request: InvitationActionRequest) -> InvitationItem:
        """Decline an invitation.

        Raises:
            NotFoundError: If the invitation does not exist
            NotAuthorizedError: If the principal is not the invitee
            InvalidTransitionError: If the invitation is no longer pending
        """
        invitation = await self.invitation_service.decline(
            InvitationId(request.invitation_id), request.principal
        )
        return InvitationItem.from_invitation(invitation, self.settings.api.frontend_url)


class RevokeInvitationUseCase:
    """Use case for a partition manager revoking an invitation."""

    def __init__(self, invitation_service: InvitationService, settings: Settings) -> None:
        """Initialize revoke invitation use case.

        Args:
            invitation_service: Invitation domain service
            settings: Application settings
        """
        self.invitation_service = invitation_service
        self.settings = settings

    async def execute(self, request: InvitationActionRequest) -> InvitationItem:
        """Revoke an invitation.

        Raises:
            NotFoundError: If the invitation does not exist
            NotAuthorizedError: If the principal cannot manage the partition
            InvalidTransitionError: If the invitation is no longer pending
        """
        invitation = await self.invitation_service.revoke(
            InvitationId(request.invitation_id), request.principal
        )
        return InvitationItem.from_invitation(invitation, self.settings.api.frontend_url)
