"""Shared in-memory authority tables.

The in-memory store, procedures, writers and invitation repository all read
and write the same InMemoryAuthorityState, the way the PostgreSQL
implementations share one database.
"""

from dataclasses import dataclass, field

from telloom.domain.model import (
    ExecutorLink,
    Invitation,
    ListenerLink,
    Profile,
    RoleAssignment,
    SharerProfile,
)
from telloom.domain.value import InvitationId, PartitionId, ProfileId, Role


@dataclass
class InMemoryAuthorityState:
    """Row storage keyed by each table's unique key."""

    profiles: dict[ProfileId, Profile] = field(default_factory=dict)
    sharers: dict[PartitionId, SharerProfile] = field(default_factory=dict)
    executor_links: dict[tuple[ProfileId, PartitionId], ExecutorLink] = field(
        default_factory=dict
    )
    listener_links: dict[tuple[ProfileId, PartitionId], ListenerLink] = field(
        default_factory=dict
    )
    roles: dict[tuple[ProfileId, Role], RoleAssignment] = field(default_factory=dict)
    invitations: dict[InvitationId, Invitation] = field(default_factory=dict)
