"""PostgreSQL implementation of Invitation repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, insert, select, update

from telloom.domain.model import Invitation
from telloom.domain.repository import InvitationRepository
from telloom.domain.value import (
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    PartitionId,
)
from telloom.persistence.mappers import invitation_to_dict, row_to_invitation
from telloom.persistence.repository.base import PostgresRepository
from telloom.persistence.tables import invitations_table


class PostgresInvitationRepository(PostgresRepository, InvitationRepository):
    """PostgreSQL implementation of InvitationRepository.

    Bound to the privileged session: invitees look invitations up before
    any relationship row exists for them.
    """

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID.

        Args:
            invitation_id: Invitation ID to look up

        Returns:
            Invitation if found, None otherwise
        """
        stmt = select(invitations_table).where(invitations_table.c.id == invitation_id)
        result = await self._run("find_invitation", stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def find_by_token(self, token: InvitationToken) -> Optional[Invitation]:
        """Find an invitation by its token.

        Args:
            token: Invitation token to look up

        Returns:
            Invitation if found, None otherwise
        """
        stmt = select(invitations_table).where(invitations_table.c.token == token.root)
        result = await self._run("find_invitation_by_token", stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def find_pending(
        self, invitee_email: Email, sharer_id: PartitionId
    ) -> Optional[Invitation]:
        """Find the pending invitation for an email on a partition."""
        stmt = select(invitations_table).where(
            and_(
                invitations_table.c.invitee_email == invitee_email.root,
                invitations_table.c.sharer_id == sharer_id,
                invitations_table.c.status == InvitationStatus.PENDING.value,
            )
        )
        result = await self._run("find_pending_invitation", stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def list_for_partition(
        self,
        sharer_id: PartitionId,
        status: InvitationStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invitation]:
        """List a partition's invitations with pagination.

        Args:
            sharer_id: Target partition
            status: Optional filter by status
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of matching invitations
        """
        stmt = (
            select(invitations_table)
            .where(invitations_table.c.sharer_id == sharer_id)
            .order_by(invitations_table.c.created_at.desc())
            .limit(limit)
            .offset(offset)
        )

        if status:
            stmt = stmt.where(invitations_table.c.status == status.value)

        result = await self._run("list_invitations", stmt)
        rows = result.mappings().all()
        return [row_to_invitation(dict(row)) for row in rows]

    async def save(self, invitation: Invitation) -> Invitation:
        """Insert a new invitation.

        Raises:
            IntegrityError: If a pending invitation already exists for this
                email and partition
        """
        stmt = insert(invitations_table).values(**invitation_to_dict(invitation))
        await self._run("insert_invitation", stmt, integrity_passthrough=True)
        return invitation

    async def update_status(
        self, invitation_id: InvitationId, status: InvitationStatus, at: datetime
    ) -> bool:
        """Move a PENDING invitation to a terminal status."""
        values: dict = {"status": status.value, "updated_at": at}
        if status is InvitationStatus.ACCEPTED:
            values["accepted_at"] = at

        stmt = (
            update(invitations_table)
            .where(
                and_(
                    invitations_table.c.id == invitation_id,
                    invitations_table.c.status == InvitationStatus.PENDING.value,
                )
            )
            .values(**values)
            .returning(invitations_table.c.id)
        )
        result = await self._run("update_invitation_status", stmt)
        return result.first() is not None
