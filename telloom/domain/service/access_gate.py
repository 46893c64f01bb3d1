"""Access gate domain service.

Answers "may this principal act on this partition?" with a fixed sequence
of independent checks. A check that errs counts as a denial for that check
only; the remaining checks still run. The result is True only on positive
evidence from the authority store.
"""

from typing import Awaitable, Callable

import logfire

from telloom.config import AuthoritySettings
from telloom.domain.error import AuthorityUnavailableError
from telloom.domain.model import Principal
from telloom.domain.repository import AuthorityProcedures, AuthorityStore
from telloom.domain.value import PartitionId

from .base import Service, within_budget

Check = Callable[[Principal, PartitionId], Awaitable[bool]]


class AccessGate(Service):
    """Domain service for partition access decisions."""

    def __init__(
        self,
        authority_store: AuthorityStore,
        procedures: AuthorityProcedures,
        authority_settings: AuthoritySettings,
    ) -> None:
        """Initialize access gate.

        Args:
            authority_store: Standard-path authority lookups
            procedures: Privileged procedures (admin flag)
            authority_settings: Store call budget
        """
        self.authority_store = authority_store
        self.procedures = procedures
        self.timeout = authority_settings.query_timeout_seconds

    async def has_access(self, principal: Principal, partition_id: PartitionId) -> bool:
        """Check read access to a partition.

        Checks, in order, short-circuiting on the first that passes:
        admin flag, ownership, executor link, listener link with access.

        Args:
            principal: Authenticated principal
            partition_id: Partition being addressed

        Returns:
            True only if one check positively established access
        """
        with logfire.span(
            "access_gate.has_access",
            principal_id=str(principal.id),
            partition_id=str(partition_id),
        ):
            return await self._first_passing(
                principal,
                partition_id,
                [
                    ("admin", self._is_admin),
                    ("ownership", self._is_owner),
                    ("executor_link", self._is_executor),
                    ("listener_link", self._is_listener),
                ],
            )

    async def can_manage(self, principal: Principal, partition_id: PartitionId) -> bool:
        """Check management rights on a partition (listeners excluded).

        Args:
            principal: Authenticated principal
            partition_id: Partition being managed

        Returns:
            True if the principal is admin, owner or executor of the partition
        """
        with logfire.span(
            "access_gate.can_manage",
            principal_id=str(principal.id),
            partition_id=str(partition_id),
        ):
            return await self._first_passing(
                principal,
                partition_id,
                [
                    ("admin", self._is_admin),
                    ("ownership", self._is_owner),
                    ("executor_link", self._is_executor),
                ],
            )

    async def _first_passing(
        self,
        principal: Principal,
        partition_id: PartitionId,
        checks: list[tuple[str, Check]],
    ) -> bool:
        for name, check in checks:
            try:
                passed = await within_budget(
                    check(principal, partition_id), f"access_check.{name}", self.timeout
                )
            except AuthorityUnavailableError as e:
                # Absence of evidence is not evidence of access
                logfire.warn(
                    "Access check failed, treating as deny",
                    check=name,
                    principal_id=str(principal.id),
                    partition_id=str(partition_id),
                    error=str(e),
                )
                continue

            if passed:
                logfire.info(
                    "Access granted",
                    check=name,
                    principal_id=str(principal.id),
                    partition_id=str(partition_id),
                )
                return True

        logfire.info(
            "Access denied",
            principal_id=str(principal.id),
            partition_id=str(partition_id),
        )
        return False

    async def _is_admin(self, principal: Principal, partition_id: PartitionId) -> bool:
        return await self.procedures.is_admin(principal.id)

    async def _is_owner(self, principal: Principal, partition_id: PartitionId) -> bool:
        sharer = await self.authority_store.find_sharer(partition_id)
        return sharer is not None and sharer.profile_id == principal.id

    async def _is_executor(
        self, principal: Principal, partition_id: PartitionId
    ) -> bool:
        link = await self.authority_store.find_executor_link(principal.id, partition_id)
        return link is not None

    async def _is_listener(
        self, principal: Principal, partition_id: PartitionId
    ) -> bool:
        link = await self.authority_store.find_listener_link(principal.id, partition_id)
        return link is not None and link.has_access
