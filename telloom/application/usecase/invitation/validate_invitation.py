"""Validate invitation use case."""

from datetime import timedelta

import logfire
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from telloom.config import Settings
from telloom.domain.model import utcnow
from telloom.domain.service import InvitationService
from telloom.domain.value import InvitationStatus, InvitationToken, Role


class ValidateInvitationRequest(BaseModel):
    """Validate invitation request."""

    token: str


class ValidateInvitationResponse(BaseModel):
    """Validate invitation response."""

    valid: bool
    status: InvitationStatus | None = None
    role: Role | None = None
    sharer_id: str | None = None
    invitee_email: str | None = None
    message: str | None = None


class ValidateInvitationUseCase:
    """Use case for previewing an invitation token.

    This allows the frontend to show the signup form for a valid invitation
    before the invitee authenticates.
    """

    def __init__(self, invitation_service: InvitationService, settings: Settings) -> None:
        """Initialize validate invitation use case.

        Args:
            invitation_service: Invitation domain service
            settings: Application settings
        """
        self.invitation_service = invitation_service
        self.settings = settings

    async def execute(
        self, request: ValidateInvitationRequest
    ) -> ValidateInvitationResponse:
        """Validate an invitation token.

        Args:
            request: Validation request with token

        Returns:
            Validation response with invitation details or error
        """
        with logfire.span(
            "validate_invitation.execute", token=request.token[:8] + "..."
        ):
            try:
                token = InvitationToken(root=request.token)
            except PydanticValidationError:
                return ValidateInvitationResponse(
                    valid=False, message="Invitation not found"
                )

            invitation = await self.invitation_service.find_by_token(token)
            if not invitation:
                return ValidateInvitationResponse(
                    valid=False, message="Invitation not found"
                )

            details = {
                "status": invitation.status,
                "role": invitation.role,
                "sharer_id": str(invitation.sharer_id),
                "invitee_email": invitation.invitee_email.root,
            }

            if invitation.status is not InvitationStatus.PENDING:
                logfire.info(
                    "Invitation no longer pending",
                    invitation_id=str(invitation.id),
                    status=invitation.status.value,
                )
                return ValidateInvitationResponse(
                    valid=False,
                    message=f"Invitation has been {invitation.status.value.lower()}",
                    **details,
                )

            expiry_days = self.settings.invitations.expiry_days
            expiry = timedelta(days=expiry_days) if expiry_days else None
            if invitation.is_expired(expiry, utcnow()):
                return ValidateInvitationResponse(
                    valid=False, message="Invitation has expired", **details
                )

            return ValidateInvitationResponse(
                valid=True, message="Valid invitation", **details
            )
