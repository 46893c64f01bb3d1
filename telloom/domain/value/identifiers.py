"""Strongly typed identifiers for Telloom access entities.

Using NewType for strong typing prevents mixing up a profile id with the
partition (sharer) id it owns or is delegated to.
"""

from typing import NewType
from uuid import UUID

# Authenticated principal / base profile
ProfileId = NewType("ProfileId", UUID)

# Content partition owned by one sharer (ProfileSharer.id)
PartitionId = NewType("PartitionId", UUID)

# Relationship and invitation rows
ExecutorLinkId = NewType("ExecutorLinkId", UUID)
ListenerLinkId = NewType("ListenerLinkId", UUID)
RoleAssignmentId = NewType("RoleAssignmentId", UUID)
InvitationId = NewType("InvitationId", UUID)
