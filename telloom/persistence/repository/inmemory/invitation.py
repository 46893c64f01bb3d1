"""In-memory invitation repository for testing."""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from telloom.domain.model import Invitation
from telloom.domain.repository import InvitationRepository
from telloom.domain.value import (
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    PartitionId,
)

from .state import InMemoryAuthorityState


class InMemoryInvitationRepository(InvitationRepository):
    """In-memory implementation of InvitationRepository for testing."""

    def __init__(self, state: InMemoryAuthorityState) -> None:
        self._state = state

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID."""
        return self._state.invitations.get(invitation_id)

    async def find_by_token(self, token: InvitationToken) -> Optional[Invitation]:
        """Find an invitation by its token."""
        for invitation in self._state.invitations.values():
            if invitation.token == token:
                return invitation
        return None

    async def find_pending(
        self, invitee_email: Email, sharer_id: PartitionId
    ) -> Optional[Invitation]:
        """Find the pending invitation for an email on a partition."""
        for invitation in self._state.invitations.values():
            if (
                invitation.invitee_email == invitee_email
                and invitation.sharer_id == sharer_id
                and invitation.status == InvitationStatus.PENDING
            ):
                return invitation
        return None

    async def list_for_partition(
        self,
        sharer_id: PartitionId,
        status: InvitationStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invitation]:
        """List a partition's invitations, newest first."""
        invitations = [
            invitation
            for invitation in self._state.invitations.values()
            if invitation.sharer_id == sharer_id
            and (status is None or invitation.status == status)
        ]
        invitations.sort(key=lambda i: i.created_at, reverse=True)
        return invitations[offset : offset + limit]

    async def save(self, invitation: Invitation) -> Invitation:
        """Insert a new invitation.

        Raises:
            IntegrityError: If a pending invitation already exists for this
                email and partition
        """
        existing = await self.find_pending(invitation.invitee_email, invitation.sharer_id)
        if existing:
            raise IntegrityError("Duplicate pending invitation", None, Exception())

        self._state.invitations[invitation.id] = invitation
        return invitation

    async def update_status(
        self, invitation_id: InvitationId, status: InvitationStatus, at: datetime
    ) -> bool:
        """Move a PENDING invitation to a terminal status."""
        invitation = self._state.invitations.get(invitation_id)
        if invitation is None or invitation.status is not InvitationStatus.PENDING:
            return False
        self._state.invitations[invitation_id] = invitation.transition_to(status, at)
        return True
