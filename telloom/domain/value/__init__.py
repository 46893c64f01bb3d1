"""Domain value objects for Telloom access control."""

from telloom.domain.value.identifiers import (
    ExecutorLinkId,
    InvitationId,
    ListenerLinkId,
    PartitionId,
    ProfileId,
    RoleAssignmentId,
)
from telloom.domain.value.types import (
    AcceptanceRejection,
    Email,
    InvitationStatus,
    InvitationToken,
    Role,
    Route,
)

__all__ = [
    # Identifiers
    "ProfileId",
    "PartitionId",
    "ExecutorLinkId",
    "ListenerLinkId",
    "RoleAssignmentId",
    "InvitationId",
    # Types
    "AcceptanceRejection",
    "Email",
    "InvitationStatus",
    "InvitationToken",
    "Role",
    "Route",
]
