"""In-memory repository implementations for testing."""

from .authority import InMemoryAuthorityProcedures, InMemoryAuthorityStore
from .invitation import InMemoryInvitationRepository
from .state import InMemoryAuthorityState
from .writer import InMemoryDirectWriter, InMemoryProcedureWriter

__all__ = [
    "InMemoryAuthorityProcedures",
    "InMemoryAuthorityState",
    "InMemoryAuthorityStore",
    "InMemoryDirectWriter",
    "InMemoryInvitationRepository",
    "InMemoryProcedureWriter",
]
