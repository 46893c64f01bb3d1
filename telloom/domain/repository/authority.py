"""Authority store interfaces.

The authority store is the ground truth for who owns and who is delegated
to which partition. It is reachable through two paths:

- AuthorityStore: the standard path, subject to row-level restrictions
- PrivilegedAuthorityStore: the bypass path, immune to them, used only to
  tolerate outages of the standard path

plus a small set of privileged procedures. Any call may fail with
AuthorityUnavailableError; implementations never swallow such failures into
an empty answer.
"""

from abc import ABC, abstractmethod
from typing import Optional

from telloom.domain.model import (
    ExecutorLink,
    ListenerLink,
    Profile,
    SharerProfile,
)
from telloom.domain.value import PartitionId, ProfileId, Role


class AuthorityStore(ABC):
    """Exact-match row lookups over the authority records.

    Raises:
        AuthorityUnavailableError: From any method, when the store errs
    """

    @abstractmethod
    async def find_profile(self, profile_id: ProfileId) -> Optional[Profile]:
        """Find a base profile by ID."""
        pass

    @abstractmethod
    async def find_sharer(self, partition_id: PartitionId) -> Optional[SharerProfile]:
        """Find the owner record of a partition.

        Args:
            partition_id: The partition (sharer) ID

        Returns:
            The owner record if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_sharer_by_owner(
        self, profile_id: ProfileId
    ) -> Optional[SharerProfile]:
        """Find the owner record belonging to a profile.

        At most one exists per profile.

        Args:
            profile_id: The owning profile's ID

        Returns:
            The owner record if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_executor_link(
        self, profile_id: ProfileId, partition_id: PartitionId
    ) -> Optional[ExecutorLink]:
        """Find the executor link for a (delegate, partition) pair."""
        pass

    @abstractmethod
    async def find_listener_link(
        self, profile_id: ProfileId, partition_id: PartitionId
    ) -> Optional[ListenerLink]:
        """Find the listener link for a (delegate, partition) pair."""
        pass

    @abstractmethod
    async def list_executor_links(self, profile_id: ProfileId) -> list[ExecutorLink]:
        """List a profile's executor links.

        Ordered most recently granted first, then by partition ID ascending.
        Resolution picks the first element, so this order must be stable.

        Args:
            profile_id: The delegate's profile ID

        Returns:
            Executor links in resolution order
        """
        pass

    @abstractmethod
    async def list_listener_links(self, profile_id: ProfileId) -> list[ListenerLink]:
        """List a profile's listener links, most recently shared first."""
        pass

    @abstractmethod
    async def list_roles(self, profile_id: ProfileId) -> set[Role]:
        """List the roles assigned to a profile."""
        pass

    @abstractmethod
    async def has_role(self, profile_id: ProfileId, role: Role) -> bool:
        """Check whether a profile holds a role assignment."""
        pass


class PrivilegedAuthorityStore(AuthorityStore):
    """Authority lookups through the privileged bypass path.

    Same contract as AuthorityStore but ignores row-level restrictions. It
    must answer exactly as the standard path would have; it exists to
    survive outages, not to widen who is authorized.
    """


class AuthorityProcedures(ABC):
    """Privileged stored procedures exposed by the authority store."""

    @abstractmethod
    async def executor_partitions_for(self, profile_id: ProfileId) -> list[PartitionId]:
        """Delegation lookup: partitions a profile is executor of.

        Same ordering as AuthorityStore.list_executor_links.

        Args:
            profile_id: The delegate's profile ID

        Returns:
            Partition IDs in resolution order
        """
        pass

    @abstractmethod
    async def is_admin(self, profile_id: ProfileId) -> bool:
        """Check whether a profile is flagged ADMIN."""
        pass
