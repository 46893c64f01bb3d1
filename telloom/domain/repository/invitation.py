"""Invitation repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from telloom.domain.model import Invitation
from telloom.domain.value import (
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    PartitionId,
)


class InvitationRepository(ABC):
    """Repository for Invitation entity.

    Defines the contract for invitation persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID.

        Args:
            invitation_id: The invitation's unique identifier

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_token(self, token: InvitationToken) -> Optional[Invitation]:
        """Find an invitation by token.

        Used when the invitee opens the invitation link.

        Args:
            token: The invitation token

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_pending(
        self, invitee_email: Email, sharer_id: PartitionId
    ) -> Optional[Invitation]:
        """Find the pending invitation for an email on a partition.

        Args:
            invitee_email: Normalized invitee email
            sharer_id: Target partition

        Returns:
            The pending invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_for_partition(
        self,
        sharer_id: PartitionId,
        status: InvitationStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invitation]:
        """List a partition's invitations, newest first.

        Args:
            sharer_id: Target partition
            status: Optional status filter
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of invitations
        """
        pass

    @abstractmethod
    async def save(self, invitation: Invitation) -> Invitation:
        """Create an invitation.

        Args:
            invitation: The invitation to create

        Returns:
            The saved invitation

        Raises:
            IntegrityError: If a pending invitation already exists for this
                email and partition
        """
        pass

    @abstractmethod
    async def update_status(
        self, invitation_id: InvitationId, status: InvitationStatus, at: datetime
    ) -> bool:
        """Move a PENDING invitation to a terminal status.

        Args:
            invitation_id: The invitation to update
            status: Target terminal status
            at: Transition timestamp

        Returns:
            True if the invitation was pending and is now updated
        """
        pass
