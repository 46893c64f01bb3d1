"""Profile and sharer (partition owner) entities."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from telloom.domain.model.common import DomainModel
from telloom.domain.value import PartitionId, ProfileId


def utcnow() -> datetime:
    """Timezone-aware current time used for all entity timestamps."""
    return datetime.now(timezone.utc)


class Profile(DomainModel):
    """Base profile record, one per authenticated principal."""

    id: ProfileId
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class SharerProfile(DomainModel):
    """Owner record for a content partition.

    Business rules:
    - At most one SharerProfile per profile
    - Its id is the partition id every delegation points at
    """

    id: PartitionId
    profile_id: ProfileId
    subscription_active: bool = False
    created_at: datetime = Field(default_factory=utcnow)
