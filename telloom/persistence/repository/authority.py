"""PostgreSQL implementation of the authority store and procedures."""

from typing import Optional

from sqlalchemy import and_, exists, func, select

from telloom.domain.model import ExecutorLink, ListenerLink, Profile, SharerProfile
from telloom.domain.repository import (
    AuthorityProcedures,
    AuthorityStore,
    PrivilegedAuthorityStore,
)
from telloom.domain.value import PartitionId, ProfileId, Role
from telloom.persistence.mappers import (
    row_to_executor_link,
    row_to_listener_link,
    row_to_profile,
    row_to_sharer,
)
from telloom.persistence.repository.base import PostgresRepository
from telloom.persistence.tables import (
    profile_executors_table,
    profile_listeners_table,
    profile_roles_table,
    profile_sharers_table,
    profiles_table,
)


class PostgresAuthorityStore(PostgresRepository, AuthorityStore):
    """PostgreSQL implementation of AuthorityStore.

    Runs on whichever session it is given; the standard session is subject
    to row-level security policies.
    """

    async def find_profile(self, profile_id: ProfileId) -> Optional[Profile]:
        """Find a base profile by ID."""
        stmt = select(profiles_table).where(profiles_table.c.id == profile_id)
        result = await self._run("find_profile", stmt)
        row = result.mappings().first()
        return row_to_profile(dict(row)) if row else None

    async def find_sharer(self, partition_id: PartitionId) -> Optional[SharerProfile]:
        """Find the owner record of a partition.

        Args:
            partition_id: Partition ID to look up

        Returns:
            Owner record if found, None otherwise
        """
        stmt = select(profile_sharers_table).where(
            profile_sharers_table.c.id == partition_id
        )
        result = await self._run("find_sharer", stmt)
        row = result.mappings().first()
        return row_to_sharer(dict(row)) if row else None

    async def find_sharer_by_owner(
        self, profile_id: ProfileId
    ) -> Optional[SharerProfile]:
        """Find the owner record belonging to a profile."""
        stmt = select(profile_sharers_table).where(
            profile_sharers_table.c.profile_id == profile_id
        )
        result = await self._run("find_sharer_by_owner", stmt)
        row = result.mappings().first()
        return row_to_sharer(dict(row)) if row else None

    async def find_executor_link(
        self, profile_id: ProfileId, partition_id: PartitionId
    ) -> Optional[ExecutorLink]:
        """Find the executor link for a (delegate, partition) pair."""
        stmt = select(profile_executors_table).where(
            and_(
                profile_executors_table.c.executor_id == profile_id,
                profile_executors_table.c.sharer_id == partition_id,
            )
        )
        result = await self._run("find_executor_link", stmt)
        row = result.mappings().first()
        return row_to_executor_link(dict(row)) if row else None

    async def find_listener_link(
        self, profile_id: ProfileId, partition_id: PartitionId
    ) -> Optional[ListenerLink]:
        """Find the listener link for a (delegate, partition) pair."""
        stmt = select(profile_listeners_table).where(
            and_(
                profile_listeners_table.c.listener_id == profile_id,
                profile_listeners_table.c.sharer_id == partition_id,
            )
        )
        result = await self._run("find_listener_link", stmt)
        row = result.mappings().first()
        return row_to_listener_link(dict(row)) if row else None

    async def list_executor_links(self, profile_id: ProfileId) -> list[ExecutorLink]:
        """List a profile's executor links in resolution order.

        Same ORDER BY as the get_executor_for_user procedure.
        """
        stmt = (
            select(profile_executors_table)
            .where(profile_executors_table.c.executor_id == profile_id)
            .order_by(
                profile_executors_table.c.created_at.desc(),
                profile_executors_table.c.sharer_id.asc(),
            )
        )
        result = await self._run("list_executor_links", stmt)
        rows = result.mappings().all()
        return [row_to_executor_link(dict(row)) for row in rows]

    async def list_listener_links(self, profile_id: ProfileId) -> list[ListenerLink]:
        """List a profile's listener links, most recently shared first."""
        stmt = (
            select(profile_listeners_table)
            .where(profile_listeners_table.c.listener_id == profile_id)
            .order_by(profile_listeners_table.c.shared_since.desc())
        )
        result = await self._run("list_listener_links", stmt)
        rows = result.mappings().all()
        return [row_to_listener_link(dict(row)) for row in rows]

    async def list_roles(self, profile_id: ProfileId) -> set[Role]:
        """List the roles assigned to a profile."""
        stmt = select(profile_roles_table.c.role).where(
            profile_roles_table.c.profile_id == profile_id
        )
        result = await self._run("list_roles", stmt)
        return {Role(role) for role in result.scalars().all()}

    async def has_role(self, profile_id: ProfileId, role: Role) -> bool:
        """Check whether a profile holds a role assignment."""
        stmt = select(
            exists().where(
                and_(
                    profile_roles_table.c.profile_id == profile_id,
                    profile_roles_table.c.role == role.value,
                )
            )
        )
        result = await self._run("has_role", stmt)
        return bool(result.scalar())


class PostgresPrivilegedAuthorityStore(PostgresAuthorityStore, PrivilegedAuthorityStore):
    """Authority store bound to the privileged (service role) session."""

    pass


class PostgresAuthorityProcedures(PostgresRepository, AuthorityProcedures):
    """Calls the privileged SQL functions created by the migrations."""

    async def executor_partitions_for(self, profile_id: ProfileId) -> list[PartitionId]:
        """Call get_executor_for_user."""
        fn = func.get_executor_for_user(profile_id).table_valued("sharer_id")
        result = await self._run("get_executor_for_user", select(fn.c.sharer_id))
        return [PartitionId(sharer_id) for sharer_id in result.scalars().all()]

    async def is_admin(self, profile_id: ProfileId) -> bool:
        """Call is_admin."""
        result = await self._run("is_admin", select(func.is_admin(profile_id)))
        return bool(result.scalar())
