"""Repository interfaces for Telloom access control.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from telloom.domain.repository.authority import (
    AuthorityProcedures,
    AuthorityStore,
    PrivilegedAuthorityStore,
)
from telloom.domain.repository.invitation import InvitationRepository
from telloom.domain.repository.writer import (
    DirectWritePath,
    ProcedureWritePath,
    RelationshipWriter,
)

__all__ = [
    "AuthorityProcedures",
    "AuthorityStore",
    "DirectWritePath",
    "InvitationRepository",
    "PrivilegedAuthorityStore",
    "ProcedureWritePath",
    "RelationshipWriter",
]
