"""Create invitation use case."""

import secrets
from datetime import datetime
from typing import Optional
from uuid import UUID

import logfire
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from telloom.application.usecase.base import BaseUseCase
from telloom.config import Settings
from telloom.domain.error import ValidationError
from telloom.domain.model import Invitation, Principal
from telloom.domain.service import InvitationService
from telloom.domain.value import Email, InvitationStatus, InvitationToken, PartitionId, Role


class InvitationItem(BaseModel):
    """Invitation item in responses."""

    invitation_id: str
    invitation_url: str  # Full invitation URL with token
    token: str
    sharer_id: str
    invitee_email: str
    role: Role
    status: InvitationStatus
    created_at: datetime
    accepted_at: Optional[datetime] = None

    @classmethod
    def from_invitation(cls, invitation: Invitation, frontend_url: str) -> "InvitationItem":
        """Build a response item from a domain invitation."""
        return cls(
            invitation_id=str(invitation.id),
            invitation_url=f"{frontend_url}/invitations/{invitation.token.root}",
            token=invitation.token.root,
            sharer_id=str(invitation.sharer_id),
            invitee_email=invitation.invitee_email.root,
            role=invitation.role,
            status=invitation.status,
            created_at=invitation.created_at,
            accepted_at=invitation.accepted_at,
        )


class CreateInvitationRequest(BaseModel):
    """Request to create an invitation."""

    principal: Principal
    sharer_id: UUID
    email: str
    role: Role


class CreateInvitationUseCase(BaseUseCase[CreateInvitationRequest, InvitationItem]):
    """Use case for inviting someone to a partition."""

    def __init__(self, invitation_service: InvitationService, settings: Settings) -> None:
        """Initialize use case.

        Args:
            invitation_service: Invitation domain service
            settings: Application settings
        """
        self.invitation_service = invitation_service
        self.settings = settings

    async def execute(self, request: CreateInvitationRequest) -> InvitationItem:
        """Create an invitation.

        Args:
            request: Create invitation request

        Returns:
            The created invitation

        Raises:
            ValidationError: If the email is malformed
            NotAuthorizedError: If the principal cannot manage the partition
            BusinessRuleViolationError: If the role is not invitable or a
                pending invitation already exists
        """
        with logfire.span(
            "create_invitation.execute",
            inviter_id=str(request.principal.id),
            sharer_id=str(request.sharer_id),
        ):
            try:
                email = Email(request.email)
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid email: {request.email}") from e

            # Generate unique token
            token = InvitationToken(
                root=secrets.token_urlsafe(self.settings.invitations.token_bytes)
            )

            invitation = await self.invitation_service.create_invitation(
                inviter=request.principal,
                sharer_id=PartitionId(request.sharer_id),
                invitee_email=email,
                role=request.role,
                token=token,
            )
            return InvitationItem.from_invitation(
                invitation, self.settings.api.frontend_url
            )
