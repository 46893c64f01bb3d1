"""PostgreSQL repository implementations."""

from telloom.persistence.repository.authority import (
    PostgresAuthorityProcedures,
    PostgresAuthorityStore,
    PostgresPrivilegedAuthorityStore,
)
from telloom.persistence.repository.invitation import PostgresInvitationRepository
from telloom.persistence.repository.writer import (
    PostgresDirectWriter,
    PostgresProcedureWriter,
)

__all__ = [
    "PostgresAuthorityProcedures",
    "PostgresAuthorityStore",
    "PostgresDirectWriter",
    "PostgresInvitationRepository",
    "PostgresPrivilegedAuthorityStore",
    "PostgresProcedureWriter",
]
