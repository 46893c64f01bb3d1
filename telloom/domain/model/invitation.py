"""Invitation entity.

A sharer (or one of their executors) invites someone by email to become an
executor or listener of the sharer's partition. Accepting the invitation is
what creates the delegation rows.
"""

from datetime import datetime, timedelta
from typing import Optional

from pydantic import Field, field_validator

from telloom.domain.error import InvalidTransitionError
from telloom.domain.model.common import DomainModel
from telloom.domain.model.profile import utcnow
from telloom.domain.value import (
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    PartitionId,
    ProfileId,
    Role,
)

INVITABLE_ROLES = frozenset({Role.EXECUTOR, Role.LISTENER})


class Invitation(DomainModel):
    """Invitation entity.

    Business rules:
    - Only EXECUTOR and LISTENER can be granted by invitation
    - Status is monotonic: PENDING -> ACCEPTED | DECLINED | REVOKED | EXPIRED
    - Terminal states are final
    - Consumed at most once
    """

    id: InvitationId
    token: InvitationToken
    invitee_email: Email
    sharer_id: PartitionId
    inviter_id: Optional[ProfileId] = None
    role: Role
    status: InvitationStatus = InvitationStatus.PENDING
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    accepted_at: Optional[datetime] = None

    @field_validator("role")
    @classmethod
    def validate_invitable_role(cls, v: Role) -> Role:
        """Reject roles that cannot be granted by invitation."""
        if v not in INVITABLE_ROLES:
            raise ValueError(f"Role {v.value} cannot be granted by invitation")
        return v

    def is_expired(self, expiry: timedelta | None, now: datetime) -> bool:
        """Whether a pending invitation has outlived its expiry window."""
        if expiry is None or self.status is not InvitationStatus.PENDING:
            return False
        return self.created_at + expiry < now

    def transition_to(self, status: InvitationStatus, at: datetime) -> "Invitation":
        """Return a copy moved to a terminal status.

        Raises:
            InvalidTransitionError: If the invitation is already terminal
                or the target status is PENDING
        """
        if self.status.is_terminal or not status.is_terminal:
            raise InvalidTransitionError(
                f"Invitation {self.id} cannot move from "
                f"{self.status.value} to {status.value}"
            )
        update: dict = {"status": status, "updated_at": at}
        if status is InvitationStatus.ACCEPTED:
            update["accepted_at"] = at
        return self.evolve(**update)
