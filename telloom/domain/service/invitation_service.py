"""Invitation domain service."""

from typing import Optional
from uuid import uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from telloom.domain.error import (
    BusinessRuleViolationError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
)
from telloom.domain.model import INVITABLE_ROLES, Invitation, Principal, utcnow
from telloom.domain.repository import InvitationRepository
from telloom.domain.value import (
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    PartitionId,
    Role,
)

from .access_gate import AccessGate
from .base import Service


class InvitationService(Service):
    """Domain service for invitation lifecycle operations.

    Acceptance is handled separately by InvitationProvisioner.
    """

    def __init__(
        self, invitation_repository: InvitationRepository, access_gate: AccessGate
    ) -> None:
        """Initialize invitation service.

        Args:
            invitation_repository: Invitation repository
            access_gate: Gate used to check management rights on a partition
        """
        self.invitation_repository = invitation_repository
        self.access_gate = access_gate

    async def create_invitation(
        self,
        inviter: Principal,
        sharer_id: PartitionId,
        invitee_email: Email,
        role: Role,
        token: InvitationToken,
    ) -> Invitation:
        """Invite someone by email to a partition.

        Args:
            inviter: Principal sending the invitation
            sharer_id: Target partition
            invitee_email: Invitee email
            role: EXECUTOR or LISTENER
            token: Fresh URL-safe token

        Returns:
            Created invitation

        Raises:
            NotAuthorizedError: If the inviter cannot manage the partition
            BusinessRuleViolationError: If the role is not invitable, or a
                pending invitation already exists for this email
        """
        with logfire.span(
            "invitation_service.create_invitation",
            inviter_id=str(inviter.id),
            sharer_id=str(sharer_id),
            role=role.value,
        ):
            if role not in INVITABLE_ROLES:
                raise BusinessRuleViolationError(
                    f"Role {role.value} cannot be granted by invitation"
                )

            if not await self.access_gate.can_manage(inviter, sharer_id):
                logfire.warn(
                    "Invitation refused, inviter cannot manage partition",
                    inviter_id=str(inviter.id),
                    sharer_id=str(sharer_id),
                )
                raise NotAuthorizedError("invite to", f"partition {sharer_id}", str(inviter.id))

            existing = await self.invitation_repository.find_pending(invitee_email, sharer_id)
            if existing:
                logfire.warn(
                    "Pending invitation already exists",
                    invitation_id=str(existing.id),
                    sharer_id=str(sharer_id),
                )
                raise BusinessRuleViolationError(
                    f"A pending invitation already exists for {invitee_email}"
                )

            now = utcnow()
            invitation = Invitation(
                id=InvitationId(uuid4()),
                token=token,
                invitee_email=invitee_email,
                sharer_id=sharer_id,
                inviter_id=inviter.id,
                role=role,
                status=InvitationStatus.PENDING,
                created_at=now,
                updated_at=now,
            )

            try:
                saved = await self.invitation_repository.save(invitation)
            except IntegrityError as e:
                # Lost a race with a concurrent invite for the same email
                raise BusinessRuleViolationError(
                    f"A pending invitation already exists for {invitee_email}"
                ) from e

            logfire.info(
                "Invitation created",
                invitation_id=str(saved.id),
                sharer_id=str(sharer_id),
                role=role.value,
            )
            return saved

    async def find_by_token(self, token: InvitationToken) -> Optional[Invitation]:
        """Get invitation by token.

        Args:
            token: Invitation token

        Returns:
            Invitation if found, None otherwise
        """
        with logfire.span(
            "invitation_service.find_by_token", token=token.preview()
        ):
            invitation = await self.invitation_repository.find_by_token(token)
            if invitation:
                logfire.info(
                    "Invitation found",
                    invitation_id=str(invitation.id),
                    status=invitation.status.value,
                )
            else:
                logfire.warn("Invitation not found", token=token.preview())
            return invitation

    async def list_for_partition(
        self,
        principal: Principal,
        sharer_id: PartitionId,
        status: InvitationStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invitation]:
        """List a partition's invitations for one of its managers.

        Raises:
            NotAuthorizedError: If the principal cannot manage the partition
        """
        with logfire.span(
            "invitation_service.list_for_partition",
            principal_id=str(principal.id),
            sharer_id=str(sharer_id),
        ):
            if not await self.access_gate.can_manage(principal, sharer_id):
                raise NotAuthorizedError(
                    "list invitations of", f"partition {sharer_id}", str(principal.id)
                )
            return await self.invitation_repository.list_for_partition(
                sharer_id, status=status, limit=limit, offset=offset
            )

    async def decline(self, invitation_id: InvitationId, principal: Principal) -> Invitation:
        """Decline an invitation as its invitee.

        Raises:
            NotFoundError: If the invitation does not exist
            NotAuthorizedError: If the principal is not the invitee
            InvalidTransitionError: If the invitation is no longer pending
        """
        with logfire.span(
            "invitation_service.decline",
            invitation_id=str(invitation_id),
            principal_id=str(principal.id),
        ):
            invitation = await self._get(invitation_id)

            email = principal.email.strip().lower() if principal.email else None
            if email != invitation.invitee_email.root:
                raise NotAuthorizedError(
                    "decline", f"invitation {invitation_id}", str(principal.id)
                )

            return await self._transition(invitation, InvitationStatus.DECLINED)

    async def revoke(self, invitation_id: InvitationId, principal: Principal) -> Invitation:
        """Revoke an invitation as a manager of its partition.

        Raises:
            NotFoundError: If the invitation does not exist
            NotAuthorizedError: If the principal cannot manage the partition
            InvalidTransitionError: If the invitation is no longer pending
        """
        with logfire.span(
            "invitation_service.revoke",
            invitation_id=str(invitation_id),
            principal_id=str(principal.id),
        ):
            invitation = await self._get(invitation_id)

            if not await self.access_gate.can_manage(principal, invitation.sharer_id):
                raise NotAuthorizedError(
                    "revoke", f"invitation {invitation_id}", str(principal.id)
                )

            return await self._transition(invitation, InvitationStatus.REVOKED)

    async def _get(self, invitation_id: InvitationId) -> Invitation:
        invitation = await self.invitation_repository.find_by_id(invitation_id)
        if not invitation:
            raise NotFoundError("Invitation", str(invitation_id))
        return invitation

    async def _transition(
        self, invitation: Invitation, status: InvitationStatus
    ) -> Invitation:
        now = utcnow()
        updated = invitation.transition_to(status, now)

        moved = await self.invitation_repository.update_status(invitation.id, status, now)
        if not moved:
            # Another request moved it between our read and write
            raise InvalidTransitionError(
                f"Invitation {invitation.id} is no longer pending"
            )

        logfire.info(
            "Invitation status changed",
            invitation_id=str(invitation.id),
            status=status.value,
        )
        return updated
