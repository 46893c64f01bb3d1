"""List invitations use case."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from telloom.application.usecase.invitation.create_invitation import InvitationItem
from telloom.config import Settings
from telloom.domain.model import Principal
from telloom.domain.service import InvitationService
from telloom.domain.value import InvitationStatus, PartitionId


class ListInvitationsRequest(BaseModel):
    """List invitations request."""

    principal: Principal
    sharer_id: UUID
    status: Optional[InvitationStatus] = None
    limit: int = Field(default=50, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class ListInvitationsResponse(BaseModel):
    """List invitations response."""

    invitations: list[InvitationItem]


class ListInvitationsUseCase:
    """Use case for listing a partition's invitations."""

    def __init__(self, invitation_service: InvitationService, settings: Settings) -> None:
        """Initialize list invitations use case.

        Args:
            invitation_service: Invitation domain service
            settings: Application settings
        """
        self.invitation_service = invitation_service
        self.settings = settings

    async def execute(self, request: ListInvitationsRequest) -> ListInvitationsResponse:
        """List invitations.

        Raises:
            NotAuthorizedError: If the principal cannot manage the partition
        """
        invitations = await self.invitation_service.list_for_partition(
            request.principal,
            PartitionId(request.sharer_id),
            status=request.status,
            limit=request.limit,
            offset=request.offset,
        )
        frontend_url = self.settings.api.frontend_url
        return ListInvitationsResponse(
            invitations=[
                InvitationItem.from_invitation(invitation, frontend_url)
                for invitation in invitations
            ]
        )
