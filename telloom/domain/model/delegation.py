"""Delegation records: a non-owner's right to act on a partition.

Both variants are unique per (delegate, partition) pair. A partition may
have many delegates of each variant.
"""

from datetime import datetime

from pydantic import Field

from telloom.domain.model.common import DomainModel
from telloom.domain.model.profile import utcnow
from telloom.domain.value import (
    ExecutorLinkId,
    ListenerLinkId,
    PartitionId,
    ProfileId,
)


class ExecutorLink(DomainModel):
    """Executor delegation: full management rights on the partition."""

    id: ExecutorLinkId
    executor_id: ProfileId
    sharer_id: PartitionId
    created_at: datetime = Field(default_factory=utcnow)


class ListenerLink(DomainModel):
    """Listener delegation: read-only access, which the sharer can suspend."""

    id: ListenerLinkId
    listener_id: ProfileId
    sharer_id: PartitionId
    has_access: bool = True
    notifications: bool = True
    shared_since: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)
