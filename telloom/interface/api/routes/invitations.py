"""Invitation routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header, Query, status
from pydantic import BaseModel

from telloom.application.usecase.invitation import (
    AcceptInvitationRequest,
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
    CreateInvitationRequest,
    CreateInvitationUseCase,
    DeclineInvitationUseCase,
    InvitationActionRequest,
    InvitationItem,
    ListInvitationsRequest,
    ListInvitationsResponse,
    ListInvitationsUseCase,
    RevokeInvitationUseCase,
    ValidateInvitationRequest,
    ValidateInvitationResponse,
    ValidateInvitationUseCase,
)
from telloom.domain.service import JWTService
from telloom.domain.value import InvitationStatus, Role
from telloom.interface.api.auth import authenticate

router = APIRouter(prefix="/invitations", tags=["invitations"], route_class=DishkaRoute)


class CreateInvitationAPIRequest(BaseModel):
    """API request for creating an invitation."""

    sharer_id: UUID
    email: str
    role: Role


class AcceptInvitationAPIRequest(BaseModel):
    """API request for accepting an invitation."""

    token: str


@router.post("", response_model=InvitationItem, status_code=status.HTTP_201_CREATED)
async def create_invitation(
    request: CreateInvitationAPIRequest,
    create_invitation_use_case: FromDishka[CreateInvitationUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> InvitationItem:
    """Invite someone by email to a partition the caller manages.

    Args:
        request: Target partition, invitee email and role
        create_invitation_use_case: Create invitation use case from DI
        jwt_service: JWT service from DI
        auth_token: JWT token from cookie
        authorization: Bearer token header

    Returns:
        The created invitation, including its link
    """
    principal = authenticate(jwt_service, auth_token, authorization)
    return await create_invitation_use_case.execute(
        CreateInvitationRequest(
            principal=principal,
            sharer_id=request.sharer_id,
            email=request.email,
            role=request.role,
        )
    )


@router.get("", response_model=ListInvitationsResponse)
async def list_invitations(
    list_invitations_use_case: FromDishka[ListInvitationsUseCase],
    jwt_service: FromDishka[JWTService],
    sharer_id: UUID = Query(...),
    status_filter: InvitationStatus | None = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> ListInvitationsResponse:
    """List a partition's invitations, newest first."""
    principal = authenticate(jwt_service, auth_token, authorization)
    return await list_invitations_use_case.execute(
        ListInvitationsRequest(
            principal=principal,
            sharer_id=sharer_id,
            status=status_filter,
            limit=limit,
            offset=offset,
        )
    )


@router.post("/accept", response_model=AcceptInvitationResponse)
async def accept_invitation(
    request: AcceptInvitationAPIRequest,
    accept_invitation_use_case: FromDishka[AcceptInvitationUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> AcceptInvitationResponse:
    """Accept an invitation as the signed-in invitee.

    Rejections (email mismatch, invitation no longer pending) come back as
    200 with accepted false and a reason.
    """
    principal = authenticate(jwt_service, auth_token, authorization)
    return await accept_invitation_use_case.execute(
        AcceptInvitationRequest(principal=principal, token=request.token)
    )


@router.post("/{invitation_id}/decline", response_model=InvitationItem)
async def decline_invitation(
    invitation_id: UUID,
    decline_invitation_use_case: FromDishka[DeclineInvitationUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> InvitationItem:
    """Decline an invitation as its invitee."""
    principal = authenticate(jwt_service, auth_token, authorization)
    return await decline_invitation_use_case.execute(
        InvitationActionRequest(principal=principal, invitation_id=invitation_id)
    )


@router.post("/{invitation_id}/revoke", response_model=InvitationItem)
async def revoke_invitation(
    invitation_id: UUID,
    revoke_invitation_use_case: FromDishka[RevokeInvitationUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> InvitationItem:
    """Revoke an invitation as a manager of its partition."""
    principal = authenticate(jwt_service, auth_token, authorization)
    return await revoke_invitation_use_case.execute(
        InvitationActionRequest(principal=principal, invitation_id=invitation_id)
    )


@router.get("/{token}", response_model=ValidateInvitationResponse)
async def validate_invitation(
    token: str,
    validate_invitation_use_case: FromDishka[ValidateInvitationUseCase],
) -> ValidateInvitationResponse:
    """Preview an invitation before signup (public endpoint).

    Args:
        token: Invitation token from the invitation link
        validate_invitation_use_case: Validate invitation use case from DI

    Returns:
        Whether the invitation can still be accepted, with its details
    """
    return await validate_invitation_use_case.execute(
        ValidateInvitationRequest(token=token)
    )
