"""PostgreSQL write paths for provisioning.

Both paths run on the privileged session and both are create-if-absent at
the database level (ON CONFLICT DO NOTHING), so a unique-key collision is
reported as "already existed" rather than as an error.
"""

from datetime import datetime

from sqlalchemy import and_, func, select, update
from sqlalchemy.dialects.postgresql import insert

from telloom.domain.model import (
    ExecutorLink,
    ListenerLink,
    Profile,
    RoleAssignment,
    SharerProfile,
)
from telloom.domain.repository import DirectWritePath, ProcedureWritePath
from telloom.domain.value import InvitationId, InvitationStatus
from telloom.persistence.mappers import (
    executor_link_to_dict,
    listener_link_to_dict,
    profile_to_dict,
    role_assignment_to_dict,
    sharer_to_dict,
)
from telloom.persistence.repository.base import PostgresRepository
from telloom.persistence.tables import (
    invitations_table,
    profile_executors_table,
    profile_listeners_table,
    profile_roles_table,
    profile_sharers_table,
    profiles_table,
)


class PostgresProcedureWriter(PostgresRepository, ProcedureWritePath):
    """Write path through the privileged SQL functions.

    Each function returns true when it inserted a row.
    """

    async def _call(self, operation: str, fn) -> bool:
        result = await self._run(operation, select(fn))
        return bool(result.scalar())

    async def ensure_profile(self, profile: Profile) -> bool:
        return await self._call(
            "create_profile",
            func.create_profile(profile.id, profile.email, profile.created_at),
        )

    async def ensure_sharer(self, sharer: SharerProfile) -> bool:
        return await self._call(
            "create_profile_sharer",
            func.create_profile_sharer(
                sharer.id, sharer.profile_id, sharer.subscription_active, sharer.created_at
            ),
        )

    async def ensure_role(self, assignment: RoleAssignment) -> bool:
        return await self._call(
            "create_profile_role",
            func.create_profile_role(
                assignment.id,
                assignment.profile_id,
                assignment.role.value,
                assignment.created_at,
            ),
        )

    async def ensure_executor_link(self, link: ExecutorLink) -> bool:
        return await self._call(
            "create_profile_executor",
            func.create_profile_executor(
                link.id, link.executor_id, link.sharer_id, link.created_at
            ),
        )

    async def ensure_listener_link(self, link: ListenerLink) -> bool:
        return await self._call(
            "create_profile_listener",
            func.create_profile_listener(
                link.id,
                link.listener_id,
                link.sharer_id,
                link.has_access,
                link.notifications,
                link.shared_since,
            ),
        )

    async def mark_invitation(
        self, invitation_id: InvitationId, status: InvitationStatus, at: datetime
    ) -> bool:
        return await self._call(
            "update_invitation_status",
            func.update_invitation_status(invitation_id, status.value, at),
        )


class PostgresDirectWriter(PostgresRepository, DirectWritePath):
    """Write path through direct inserts on the privileged session."""

    async def _insert(self, operation: str, table, values: dict, conflict: list[str]) -> bool:
        stmt = (
            insert(table)
            .values(**values)
            .on_conflict_do_nothing(index_elements=conflict)
            .returning(table.c.id)
        )
        result = await self._run(operation, stmt)
        return result.first() is not None

    async def ensure_profile(self, profile: Profile) -> bool:
        return await self._insert(
            "insert_profile", profiles_table, profile_to_dict(profile), ["id"]
        )

    async def ensure_sharer(self, sharer: SharerProfile) -> bool:
        return await self._insert(
            "insert_sharer", profile_sharers_table, sharer_to_dict(sharer), ["profile_id"]
        )

    async def ensure_role(self, assignment: RoleAssignment) -> bool:
        return await self._insert(
            "insert_role",
            profile_roles_table,
            role_assignment_to_dict(assignment),
            ["profile_id", "role"],
        )

    async def ensure_executor_link(self, link: ExecutorLink) -> bool:
        return await self._insert(
            "insert_executor_link",
            profile_executors_table,
            executor_link_to_dict(link),
            ["executor_id", "sharer_id"],
        )

    async def ensure_listener_link(self, link: ListenerLink) -> bool:
        return await self._insert(
            "insert_listener_link",
            profile_listeners_table,
            listener_link_to_dict(link),
            ["listener_id", "sharer_id"],
        )

    async def mark_invitation(
        self, invitation_id: InvitationId, status: InvitationStatus, at: datetime
    ) -> bool:
        values: dict = {"status": status.value, "updated_at": at}
        if status is InvitationStatus.ACCEPTED:
            values["accepted_at"] = at

        stmt = (
            update(invitations_table)
            .where(
                and_(
                    invitations_table.c.id == invitation_id,
                    invitations_table.c.status == InvitationStatus.PENDING.value,
                )
            )
            .values(**values)
            .returning(invitations_table.c.id)
        )
        result = await self._run("update_invitation", stmt)
        return result.first() is not None
