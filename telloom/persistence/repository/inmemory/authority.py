"""In-memory authority store and procedures for testing."""

from typing import Optional

from telloom.domain.model import ExecutorLink, ListenerLink, Profile, SharerProfile
from telloom.domain.repository import AuthorityProcedures, PrivilegedAuthorityStore
from telloom.domain.value import PartitionId, ProfileId, Role

from .state import InMemoryAuthorityState


def _resolution_order(links: list[ExecutorLink]) -> list[ExecutorLink]:
    # Newest first, then partition id ascending
    by_partition = sorted(links, key=lambda link: str(link.sharer_id))
    return sorted(by_partition, key=lambda link: link.created_at, reverse=True)


class InMemoryAuthorityStore(PrivilegedAuthorityStore):
    """In-memory implementation of the authority store for testing.

    Has no row-level restrictions, so one instance serves both the standard
    and the privileged path.
    """

    def __init__(self, state: InMemoryAuthorityState) -> None:
        self._state = state

    async def find_profile(self, profile_id: ProfileId) -> Optional[Profile]:
        """Find a base profile by ID."""
        return self._state.profiles.get(profile_id)

    async def find_sharer(self, partition_id: PartitionId) -> Optional[SharerProfile]:
        """Find the owner record of a partition."""
        return self._state.sharers.get(partition_id)

    async def find_sharer_by_owner(
        self, profile_id: ProfileId
    ) -> Optional[SharerProfile]:
        """Find the owner record belonging to a profile."""
        for sharer in self._state.sharers.values():
            if sharer.profile_id == profile_id:
                return sharer
        return None

    async def find_executor_link(
        self, profile_id: ProfileId, partition_id: PartitionId
    ) -> Optional[ExecutorLink]:
        """Find the executor link for a (delegate, partition) pair."""
        return self._state.executor_links.get((profile_id, partition_id))

    async def find_listener_link(
        self, profile_id: ProfileId, partition_id: PartitionId
    ) -> Optional[ListenerLink]:
        """Find the listener link for a (delegate, partition) pair."""
        return self._state.listener_links.get((profile_id, partition_id))

    async def list_executor_links(self, profile_id: ProfileId) -> list[ExecutorLink]:
        """List a profile's executor links in resolution order."""
        links = [
            link
            for (executor_id, _), link in self._state.executor_links.items()
            if executor_id == profile_id
        ]
        return _resolution_order(links)

    async def list_listener_links(self, profile_id: ProfileId) -> list[ListenerLink]:
        """List a profile's listener links, most recently shared first."""
        links = [
            link
            for (listener_id, _), link in self._state.listener_links.items()
            if listener_id == profile_id
        ]
        return sorted(links, key=lambda link: link.shared_since, reverse=True)

    async def list_roles(self, profile_id: ProfileId) -> set[Role]:
        """List the roles assigned to a profile."""
        return {role for (owner, role) in self._state.roles if owner == profile_id}

    async def has_role(self, profile_id: ProfileId, role: Role) -> bool:
        """Check whether a profile holds a role assignment."""
        return (profile_id, role) in self._state.roles


class InMemoryAuthorityProcedures(AuthorityProcedures):
    """In-memory implementation of the privileged procedures for testing."""

    def __init__(self, state: InMemoryAuthorityState) -> None:
        self._state = state

    async def executor_partitions_for(self, profile_id: ProfileId) -> list[PartitionId]:
        """Delegation lookup, same order as list_executor_links."""
        links = [
            link
            for (executor_id, _), link in self._state.executor_links.items()
            if executor_id == profile_id
        ]
        return [link.sharer_id for link in _resolution_order(links)]

    async def is_admin(self, profile_id: ProfileId) -> bool:
        """Check whether a profile is flagged ADMIN."""
        return (profile_id, Role.ADMIN) in self._state.roles
