"""Test configuration and fixtures."""

from datetime import datetime
from uuid import uuid4

from telloom.domain.model import (
    ClaimsSnapshot,
    ExecutorLink,
    Invitation,
    ListenerLink,
    Principal,
    Profile,
    RoleAssignment,
    SharerProfile,
    utcnow,
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
from telloom.persistence.repository.inmemory import InMemoryAuthorityState


def make_principal(
    email: str | None = None,
    claims: ClaimsSnapshot | None = None,
    active_role: Role | None = None,
) -> Principal:
    """Build an authenticated principal with a fresh profile id."""
    return Principal(
        id=ProfileId(uuid4()),
        email=email,
        claims=claims,
        active_role=active_role,
    )


def seed_role(state: InMemoryAuthorityState, profile_id: ProfileId, role: Role) -> None:
    """Give a profile a role assignment."""
    state.roles[(profile_id, role)] = RoleAssignment(
        id=RoleAssignmentId(uuid4()), profile_id=profile_id, role=role
    )


def seed_profile(state: InMemoryAuthorityState, principal: Principal) -> Profile:
    """Create the base profile of a principal."""
    profile = Profile(id=principal.id, email=principal.email)
    state.profiles[profile.id] = profile
    return profile


def seed_sharer(state: InMemoryAuthorityState, owner: Principal) -> SharerProfile:
    """Make a principal the owner of a new partition (profile, row and role)."""
    seed_profile(state, owner)
    sharer = SharerProfile(id=PartitionId(uuid4()), profile_id=owner.id)
    state.sharers[sharer.id] = sharer
    seed_role(state, owner.id, Role.SHARER)
    return sharer


def seed_executor(
    state: InMemoryAuthorityState,
    profile_id: ProfileId,
    partition_id: PartitionId,
    created_at: datetime | None = None,
) -> ExecutorLink:
    """Delegate a partition to a profile as executor."""
    link = ExecutorLink(
        id=ExecutorLinkId(uuid4()),
        executor_id=profile_id,
        sharer_id=partition_id,
        created_at=created_at or utcnow(),
    )
    state.executor_links[(profile_id, partition_id)] = link
    return link


def seed_listener(
    state: InMemoryAuthorityState,
    profile_id: ProfileId,
    partition_id: PartitionId,
    has_access: bool = True,
) -> ListenerLink:
    """Delegate a partition to a profile as listener."""
    link = ListenerLink(
        id=ListenerLinkId(uuid4()),
        listener_id=profile_id,
        sharer_id=partition_id,
        has_access=has_access,
    )
    state.listener_links[(profile_id, partition_id)] = link
    return link


def make_invitation(
    sharer_id: PartitionId,
    email: str,
    role: Role = Role.EXECUTOR,
    status: InvitationStatus = InvitationStatus.PENDING,
    created_at: datetime | None = None,
    inviter_id: ProfileId | None = None,
) -> Invitation:
    """Build an invitation with a fresh id and token."""
    now = created_at or utcnow()
    return Invitation(
        id=InvitationId(uuid4()),
        token=InvitationToken(uuid4().hex),
        invitee_email=Email(email),
        sharer_id=sharer_id,
        inviter_id=inviter_id,
        role=role,
        status=status,
        created_at=now,
        updated_at=now,
    )


def seed_invitation(state: InMemoryAuthorityState, invitation: Invitation) -> Invitation:
    """Store an invitation."""
    state.invitations[invitation.id] = invitation
    return invitation
