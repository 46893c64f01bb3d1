"""Domain model entities for Telloom access control."""

from telloom.domain.model.acceptance import AcceptanceResult
from telloom.domain.model.delegation import ExecutorLink, ListenerLink
from telloom.domain.model.diagnosis import RoleDiagnosis
from telloom.domain.model.invitation import INVITABLE_ROLES, Invitation
from telloom.domain.model.principal import ClaimsSnapshot, Principal
from telloom.domain.model.profile import Profile, SharerProfile, utcnow
from telloom.domain.model.role_assignment import RoleAssignment

__all__ = [
    "AcceptanceResult",
    "ClaimsSnapshot",
    "ExecutorLink",
    "INVITABLE_ROLES",
    "Invitation",
    "ListenerLink",
    "Principal",
    "Profile",
    "RoleAssignment",
    "RoleDiagnosis",
    "SharerProfile",
    "utcnow",
]
