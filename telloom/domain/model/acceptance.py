"""Outcome of an invitation acceptance."""

from typing import Optional

from telloom.domain.value import AcceptanceRejection, PartitionId, Role
from telloom.domain.value.common import ValueObject


class AcceptanceResult(ValueObject):
    """Result of InvitationProvisioner.accept_invitation.

    accepted is False only for validation-level denials. Best-effort sub-steps
    that failed after the primary delegation was written are listed in
    incomplete_steps for operational follow-up.
    """

    accepted: bool
    reason: Optional[AcceptanceRejection] = None
    partition_id: Optional[PartitionId] = None
    role: Optional[Role] = None
    incomplete_steps: tuple[str, ...] = ()

    @classmethod
    def denied(cls, reason: AcceptanceRejection) -> "AcceptanceResult":
        """Build a denial result."""
        return cls(accepted=False, reason=reason)
