"""Effective partition resolution.

Works out which partition ("sharer context") a principal acts on by walking
an ordered chain of authority providers and stopping at the first that
produces a verified answer. Each provider only ever returns a partition it
has just verified against the authority store; nothing is carried over from
an earlier provider or from the session token unchecked.
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Optional, Sequence

import logfire

from telloom.config import AuthoritySettings
from telloom.domain.error import AuthorityUnavailableError
from telloom.domain.model import Principal
from telloom.domain.repository import (
    AuthorityProcedures,
    AuthorityStore,
    PrivilegedAuthorityStore,
)
from telloom.domain.value import PartitionId

from .access_gate import AccessGate
from .base import Service, within_budget


class AuthorityProvider(ABC):
    """One source of a principal's effective partition."""

    name: ClassVar[str]

    @abstractmethod
    async def lookup(self, principal: Principal) -> Optional[PartitionId]:
        """Return a verified partition for the principal, or None.

        Raises:
            AuthorityUnavailableError: If the underlying store failed
        """
        pass


class ClaimsHintAuthority(AuthorityProvider):
    """Re-verifies the sharer_id cached in the session claims."""

    name = "claims_hint"

    def __init__(self, authority_store: AuthorityStore) -> None:
        self.authority_store = authority_store

    async def lookup(self, principal: Principal) -> Optional[PartitionId]:
        hint = principal.claims
        if hint is None or hint.sharer_id is None:
            return None

        sharer = await self.authority_store.find_sharer(hint.sharer_id)
        if sharer is not None and sharer.profile_id == principal.id:
            return sharer.id

        logfire.info(
            "Claims hint did not verify",
            principal_id=str(principal.id),
            hinted_partition_id=str(hint.sharer_id),
        )
        return None


class OwnershipAuthority(AuthorityProvider):
    """The partition the principal owns, if any."""

    name = "ownership"

    def __init__(self, authority_store: AuthorityStore) -> None:
        self.authority_store = authority_store

    async def lookup(self, principal: Principal) -> Optional[PartitionId]:
        sharer = await self.authority_store.find_sharer_by_owner(principal.id)
        return sharer.id if sharer else None


class DelegationAuthority(AuthorityProvider):
    """First executor partition from the delegation-lookup procedure."""

    name = "delegation"

    def __init__(self, procedures: AuthorityProcedures) -> None:
        self.procedures = procedures

    async def lookup(self, principal: Principal) -> Optional[PartitionId]:
        partitions = await self.procedures.executor_partitions_for(principal.id)
        return partitions[0] if partitions else None


class BypassOwnershipAuthority(OwnershipAuthority):
    """Ownership lookup through the privileged bypass path."""

    name = "bypass_ownership"

    def __init__(self, privileged_store: PrivilegedAuthorityStore) -> None:
        super().__init__(privileged_store)


class BypassDelegationAuthority(AuthorityProvider):
    """Executor links through the privileged bypass path.

    Reads the same rows, in the same order, as the delegation procedure.
    """

    name = "bypass_delegation"

    def __init__(self, privileged_store: PrivilegedAuthorityStore) -> None:
        self.privileged_store = privileged_store

    async def lookup(self, principal: Principal) -> Optional[PartitionId]:
        links = await self.privileged_store.list_executor_links(principal.id)
        return links[0].sharer_id if links else None


def default_authority_chain(
    authority_store: AuthorityStore,
    procedures: AuthorityProcedures,
    privileged_store: PrivilegedAuthorityStore,
) -> list[AuthorityProvider]:
    """Build the standard provider order.

    claims hint -> ownership -> delegation -> bypass ownership -> bypass delegation
    """
    return [
        ClaimsHintAuthority(authority_store),
        OwnershipAuthority(authority_store),
        DelegationAuthority(procedures),
        BypassOwnershipAuthority(privileged_store),
        BypassDelegationAuthority(privileged_store),
    ]


class AuthorityResolver(Service):
    """Domain service resolving a principal's effective partition."""

    def __init__(
        self,
        access_gate: AccessGate,
        providers: Sequence[AuthorityProvider],
        authority_settings: AuthoritySettings,
    ) -> None:
        """Initialize authority resolver.

        Args:
            access_gate: Gate used to verify a caller-supplied candidate
            providers: Authority providers, tried in order
            authority_settings: Store call budget
        """
        self.access_gate = access_gate
        self.providers = list(providers)
        self.timeout = authority_settings.query_timeout_seconds

    async def resolve_effective_partition(
        self,
        principal: Principal,
        candidate_partition_id: Optional[PartitionId] = None,
    ) -> Optional[PartitionId]:
        """Resolve the partition a principal acts on.

        A candidate that passes the access gate is returned as-is; this is the
        only short-circuit. Otherwise each provider is tried in order, and a
        provider failure is logged and skipped.

        Args:
            principal: Authenticated principal
            candidate_partition_id: Partition the caller asked for, if any

        Returns:
            Verified partition ID, or None when the principal has none (the
            caller routes to onboarding, never to a default partition)
        """
        with logfire.span(
            "authority_resolver.resolve_effective_partition",
            principal_id=str(principal.id),
            candidate_partition_id=(
                str(candidate_partition_id) if candidate_partition_id else None
            ),
        ):
            if candidate_partition_id is not None:
                if await self.access_gate.has_access(principal, candidate_partition_id):
                    logfire.info(
                        "Candidate partition verified",
                        principal_id=str(principal.id),
                        partition_id=str(candidate_partition_id),
                    )
                    return candidate_partition_id
                logfire.info(
                    "Candidate partition rejected, resolving from authority",
                    principal_id=str(principal.id),
                    partition_id=str(candidate_partition_id),
                )

            for provider in self.providers:
                try:
                    partition_id = await within_budget(
                        provider.lookup(principal),
                        f"authority.{provider.name}",
                        self.timeout,
                    )
                except AuthorityUnavailableError as e:
                    logfire.warn(
                        "Authority provider failed, continuing cascade",
                        provider=provider.name,
                        principal_id=str(principal.id),
                        error=str(e),
                    )
                    continue

                if partition_id is not None:
                    logfire.info(
                        "Effective partition resolved",
                        provider=provider.name,
                        principal_id=str(principal.id),
                        partition_id=str(partition_id),
                    )
                    return partition_id

            logfire.info("No effective partition", principal_id=str(principal.id))
            return None
