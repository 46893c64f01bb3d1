"""Fault-injecting in-memory stores and write paths.

Each double records the operations it was asked for in ``calls`` and can
be told to fail (raise AuthorityUnavailableError), stall past the call
budget, or collide on a unique key for selected operations.
"""

import asyncio
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError

from telloom.domain.error import AuthorityUnavailableError
from telloom.domain.model import (
    ExecutorLink,
    Invitation,
    ListenerLink,
    Profile,
    RoleAssignment,
    SharerProfile,
)
from telloom.domain.repository import DirectWritePath, ProcedureWritePath
from telloom.domain.value import (
    InvitationId,
    InvitationStatus,
    PartitionId,
    ProfileId,
    Role,
)
from telloom.persistence.repository.inmemory import (
    InMemoryAuthorityProcedures,
    InMemoryAuthorityState,
    InMemoryAuthorityStore,
    InMemoryInvitationRepository,
)
from telloom.persistence.repository.inmemory.writer import _InMemoryWrites


class _Faults:
    def __init__(
        self,
        failing: Iterable[str] = (),
        slow: Iterable[str] = (),
        conflicting: Iterable[str] = (),
        delay: float = 1.0,
    ) -> None:
        self.failing = set(failing)
        self.slow = set(slow)
        self.conflicting = set(conflicting)
        self.delay = delay
        self.calls: list[str] = []

    async def _guard(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failing:
            raise AuthorityUnavailableError(operation, "injected failure")
        if operation in self.conflicting:
            raise IntegrityError("injected unique violation", None, Exception())
        if operation in self.slow:
            await asyncio.sleep(self.delay)

    def count(self, operation: str) -> int:
        return self.calls.count(operation)


class FaultyAuthorityStore(_Faults, InMemoryAuthorityStore):
    """In-memory authority store with injectable faults."""

    def __init__(self, state: InMemoryAuthorityState, **faults) -> None:
        _Faults.__init__(self, **faults)
        InMemoryAuthorityStore.__init__(self, state)

    async def find_profile(self, profile_id: ProfileId) -> Optional[Profile]:
        await self._guard("find_profile")
        return await super().find_profile(profile_id)

    async def find_sharer(self, partition_id: PartitionId) -> Optional[SharerProfile]:
        await self._guard("find_sharer")
        return await super().find_sharer(partition_id)

    async def find_sharer_by_owner(
        self, profile_id: ProfileId
    ) -> Optional[SharerProfile]:
        await self._guard("find_sharer_by_owner")
        return await super().find_sharer_by_owner(profile_id)

    async def find_executor_link(
        self, profile_id: ProfileId, partition_id: PartitionId
    ) -> Optional[ExecutorLink]:
        await self._guard("find_executor_link")
        return await super().find_executor_link(profile_id, partition_id)

    async def find_listener_link(
        self, profile_id: ProfileId, partition_id: PartitionId
    ) -> Optional[ListenerLink]:
        await self._guard("find_listener_link")
        return await super().find_listener_link(profile_id, partition_id)

    async def list_executor_links(self, profile_id: ProfileId) -> list[ExecutorLink]:
        await self._guard("list_executor_links")
        return await super().list_executor_links(profile_id)

    async def list_listener_links(self, profile_id: ProfileId) -> list[ListenerLink]:
        await self._guard("list_listener_links")
        return await super().list_listener_links(profile_id)

    async def list_roles(self, profile_id: ProfileId) -> set[Role]:
        await self._guard("list_roles")
        return await super().list_roles(profile_id)

    async def has_role(self, profile_id: ProfileId, role: Role) -> bool:
        await self._guard("has_role")
        return await super().has_role(profile_id, role)


class FaultyAuthorityProcedures(_Faults, InMemoryAuthorityProcedures):
    """In-memory procedures with injectable faults."""

    def __init__(self, state: InMemoryAuthorityState, **faults) -> None:
        _Faults.__init__(self, **faults)
        InMemoryAuthorityProcedures.__init__(self, state)

    async def executor_partitions_for(self, profile_id: ProfileId) -> list[PartitionId]:
        await self._guard("executor_partitions_for")
        return await super().executor_partitions_for(profile_id)

    async def is_admin(self, profile_id: ProfileId) -> bool:
        await self._guard("is_admin")
        return await super().is_admin(profile_id)


class _FaultyWrites(_Faults, _InMemoryWrites):
    def __init__(self, state: InMemoryAuthorityState, **faults) -> None:
        _Faults.__init__(self, **faults)
        _InMemoryWrites.__init__(self, state)

    async def ensure_profile(self, profile: Profile) -> bool:
        await self._guard("ensure_profile")
        return await super().ensure_profile(profile)

    async def ensure_sharer(self, sharer: SharerProfile) -> bool:
        await self._guard("ensure_sharer")
        return await super().ensure_sharer(sharer)

    async def ensure_role(self, assignment: RoleAssignment) -> bool:
        await self._guard("ensure_role")
        return await super().ensure_role(assignment)

    async def ensure_executor_link(self, link: ExecutorLink) -> bool:
        await self._guard("ensure_executor_link")
        return await super().ensure_executor_link(link)

    async def ensure_listener_link(self, link: ListenerLink) -> bool:
        await self._guard("ensure_listener_link")
        return await super().ensure_listener_link(link)

    async def mark_invitation(
        self, invitation_id: InvitationId, status: InvitationStatus, at: datetime
    ) -> bool:
        await self._guard("mark_invitation")
        return await super().mark_invitation(invitation_id, status, at)


class FaultyProcedureWriter(_FaultyWrites, ProcedureWritePath):
    """Procedure write path with injectable faults."""

    pass


class FaultyDirectWriter(_FaultyWrites, DirectWritePath):
    """Direct write path with injectable faults."""

    pass


ALL_WRITES = (
    "ensure_profile",
    "ensure_sharer",
    "ensure_role",
    "ensure_executor_link",
    "ensure_listener_link",
    "mark_invitation",
)


class FaultyInvitationRepository(_Faults, InMemoryInvitationRepository):
    """In-memory invitation repository with injectable faults on lookups."""

    def __init__(self, state: InMemoryAuthorityState, **faults) -> None:
        _Faults.__init__(self, **faults)
        InMemoryInvitationRepository.__init__(self, state)

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        await self._guard("find_by_id")
        return await super().find_by_id(invitation_id)
