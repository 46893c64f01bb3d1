"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from telloom.domain.model import (
    ExecutorLink,
    Invitation,
    ListenerLink,
    Profile,
    RoleAssignment,
    SharerProfile,
)
from telloom.domain.value import (
    Email,
    ExecutorLinkId,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    ListenerLinkId,
    PartitionId,
    ProfileId,
    Role,
    RoleAssignmentId,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_profile(row: Dict[str, Any]) -> Profile:
    """Convert database row to Profile domain model.

    Args:
        row: Database row as dict

    Returns:
        Profile domain model
    """
    return Profile(
        id=ProfileId(_uuid(row["id"])),
        email=row.get("email"),
        first_name=row.get("first_name"),
        last_name=row.get("last_name"),
        created_at=row["created_at"],
    )


def profile_to_dict(profile: Profile) -> Dict[str, Any]:
    """Convert Profile domain model to database dict."""
    return profile.model_dump()


def row_to_sharer(row: Dict[str, Any]) -> SharerProfile:
    """Convert database row to SharerProfile domain model."""
    return SharerProfile(
        id=PartitionId(_uuid(row["id"])),
        profile_id=ProfileId(_uuid(row["profile_id"])),
        subscription_active=row["subscription_active"],
        created_at=row["created_at"],
    )


def sharer_to_dict(sharer: SharerProfile) -> Dict[str, Any]:
    """Convert SharerProfile domain model to database dict."""
    return sharer.model_dump()


def row_to_executor_link(row: Dict[str, Any]) -> ExecutorLink:
    """Convert database row to ExecutorLink domain model."""
    return ExecutorLink(
        id=ExecutorLinkId(_uuid(row["id"])),
        executor_id=ProfileId(_uuid(row["executor_id"])),
        sharer_id=PartitionId(_uuid(row["sharer_id"])),
        created_at=row["created_at"],
    )


def executor_link_to_dict(link: ExecutorLink) -> Dict[str, Any]:
    """Convert ExecutorLink domain model to database dict."""
    return link.model_dump()


def row_to_listener_link(row: Dict[str, Any]) -> ListenerLink:
    """Convert database row to ListenerLink domain model."""
    return ListenerLink(
        id=ListenerLinkId(_uuid(row["id"])),
        listener_id=ProfileId(_uuid(row["listener_id"])),
        sharer_id=PartitionId(_uuid(row["sharer_id"])),
        has_access=row["has_access"],
        notifications=row["notifications"],
        shared_since=row["shared_since"],
        created_at=row["created_at"],
    )


def listener_link_to_dict(link: ListenerLink) -> Dict[str, Any]:
    """Convert ListenerLink domain model to database dict."""
    return link.model_dump()


def row_to_role_assignment(row: Dict[str, Any]) -> RoleAssignment:
    """Convert database row to RoleAssignment domain model."""
    return RoleAssignment(
        id=RoleAssignmentId(_uuid(row["id"])),
        profile_id=ProfileId(_uuid(row["profile_id"])),
        role=Role(row["role"]),
        created_at=row["created_at"],
    )


def role_assignment_to_dict(assignment: RoleAssignment) -> Dict[str, Any]:
    """Convert RoleAssignment domain model to database dict.

    Enum values are dumped as their string value.
    """
    data = assignment.model_dump()
    data["role"] = assignment.role.value
    return data


def row_to_invitation(row: Dict[str, Any]) -> Invitation:
    """Convert database row to Invitation domain model.

    Args:
        row: Database row as dict

    Returns:
        Invitation domain model
    """
    return Invitation(
        id=InvitationId(_uuid(row["id"])),
        token=InvitationToken(row["token"]),
        invitee_email=Email(row["invitee_email"]),
        sharer_id=PartitionId(_uuid(row["sharer_id"])),
        inviter_id=(
            ProfileId(_uuid(row["inviter_id"])) if row.get("inviter_id") else None
        ),
        role=Role(row["role"]),
        status=InvitationStatus(row["status"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        accepted_at=row.get("accepted_at"),
    )


def invitation_to_dict(invitation: Invitation) -> Dict[str, Any]:
    """Convert Invitation domain model to database dict.

    Args:
        invitation: Invitation domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return {
        "id": invitation.id,
        "token": invitation.token.root,
        "invitee_email": invitation.invitee_email.root,
        "sharer_id": invitation.sharer_id,
        "inviter_id": invitation.inviter_id,
        "role": invitation.role.value,
        "status": invitation.status.value,
        "created_at": invitation.created_at,
        "updated_at": invitation.updated_at,
        "accepted_at": invitation.accepted_at,
    }
