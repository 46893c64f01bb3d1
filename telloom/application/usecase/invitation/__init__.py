"""Invitation use cases."""

from telloom.application.usecase.invitation.accept_invitation import (
    AcceptInvitationRequest,
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
)
from telloom.application.usecase.invitation.create_invitation import (
    CreateInvitationRequest,
    CreateInvitationUseCase,
    InvitationItem,
)
from telloom.application.usecase.invitation.list_invitations import (
    ListInvitationsRequest,
    ListInvitationsResponse,
    ListInvitationsUseCase,
)
from telloom.application.usecase.invitation.respond_invitation import (
    DeclineInvitationUseCase,
    InvitationActionRequest,
    RevokeInvitationUseCase,
)
from telloom.application.usecase.invitation.validate_invitation import (
    ValidateInvitationRequest,
    ValidateInvitationResponse,
    ValidateInvitationUseCase,
)

__all__ = [
    "AcceptInvitationRequest",
    "AcceptInvitationResponse",
    "AcceptInvitationUseCase",
    "CreateInvitationRequest",
    "CreateInvitationUseCase",
    "DeclineInvitationUseCase",
    "InvitationActionRequest",
    "InvitationItem",
    "ListInvitationsRequest",
    "ListInvitationsResponse",
    "ListInvitationsUseCase",
    "RevokeInvitationUseCase",
    "ValidateInvitationRequest",
    "ValidateInvitationResponse",
    "ValidateInvitationUseCase",
]
