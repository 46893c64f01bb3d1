"""Role assignment entity."""

from datetime import datetime

from pydantic import Field

from telloom.domain.model.common import DomainModel
from telloom.domain.model.profile import utcnow
from telloom.domain.value import ProfileId, Role, RoleAssignmentId


class RoleAssignment(DomainModel):
    """A role held by a profile.

    Unique per (profile_id, role). Holding EXECUTOR or LISTENER does not by
    itself imply the matching delegation row exists; the two can diverge
    after a partially failed provisioning.
    """

    id: RoleAssignmentId
    profile_id: ProfileId
    role: Role
    created_at: datetime = Field(default_factory=utcnow)
