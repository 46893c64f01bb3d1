"""Authenticated principal and its advisory claims hint.

A Principal is what the authentication layer hands us: a verified profile id,
the email it signed in with and whatever role facts were cached in the
session token. Those cached facts are a ClaimsSnapshot, which is a hint and
nothing more. Access decisions always go back to the authority store.
"""

from typing import Any, Mapping, Optional
from uuid import UUID

import logfire
from pydantic import Field

from telloom.domain.model.common import DomainModel
from telloom.domain.value import PartitionId, ProfileId, Role
from telloom.domain.value.common import ValueObject


class ClaimsSnapshot(ValueObject):
    """Role facts cached in the session token's app_metadata.

    May be stale. Never an authority source for access checks; only used as
    a candidate that must be re-verified, or for routing when the store is
    unreachable.
    """

    roles: frozenset[Role] = frozenset()
    sharer_id: Optional[PartitionId] = None
    executor_count: int = Field(default=0, ge=0)

    @classmethod
    def from_app_metadata(cls, app_metadata: Mapping[str, Any] | None) -> "ClaimsSnapshot":
        """Parse the claims hint from token app_metadata.

        Unknown roles and malformed values are dropped rather than rejected,
        since the hint is advisory.

        Args:
            app_metadata: The ``app_metadata`` object of the session token

        Returns:
            Parsed claims snapshot (empty when nothing usable was present)
        """
        if not app_metadata:
            return cls()

        roles: set[Role] = set()
        raw_roles = app_metadata.get("roles")
        if isinstance(raw_roles, list):
            for raw in raw_roles:
                try:
                    roles.add(Role(str(raw).upper()))
                except ValueError:
                    logfire.debug("Ignoring unknown role in claims", role=str(raw))

        sharer_id = None
        raw_sharer = app_metadata.get("sharer_id")
        if raw_sharer:
            try:
                sharer_id = PartitionId(UUID(str(raw_sharer)))
            except ValueError:
                logfire.debug("Ignoring malformed sharer_id in claims")

        executor_count = app_metadata.get("executor_count")
        if not isinstance(executor_count, int) or executor_count < 0:
            executor_count = 0

        return cls(
            roles=frozenset(roles),
            sharer_id=sharer_id,
            executor_count=executor_count,
        )


class Principal(DomainModel):
    """Authenticated identity threaded explicitly through every call.

    active_role replaces a process-wide "active role" cookie: the caller
    states which role it wants to act in, and it only takes effect if the
    profile actually holds it.
    """

    id: ProfileId
    email: Optional[str] = None
    claims: Optional[ClaimsSnapshot] = None  # Advisory only
    active_role: Optional[Role] = None
