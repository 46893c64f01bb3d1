"""Role domain service."""

from uuid import uuid4

import logfire

from telloom.config import AuthoritySettings
from telloom.domain.error import AuthorityUnavailableError, BusinessRuleViolationError
from telloom.domain.model import (
    Principal,
    Profile,
    RoleAssignment,
    RoleDiagnosis,
    SharerProfile,
)
from telloom.domain.repository import AuthorityStore
from telloom.domain.value import PartitionId, Role, RoleAssignmentId

from .base import Service, within_budget
from .idempotent_upsert import IdempotentUpsert

SELF_SERVICE_ROLES = frozenset({Role.SHARER, Role.LISTENER})


class RoleService(Service):
    """Domain service for role lookups, self-service selection and repair."""

    def __init__(
        self,
        authority_store: AuthorityStore,
        upsert: IdempotentUpsert,
        authority_settings: AuthoritySettings,
    ) -> None:
        """Initialize role service.

        Args:
            authority_store: Standard-path authority lookups
            upsert: Two-path create-if-absent writer
            authority_settings: Store call budget
        """
        self.authority_store = authority_store
        self.upsert = upsert
        self.timeout = authority_settings.query_timeout_seconds

    async def held_roles(self, principal: Principal) -> set[Role]:
        """Roles the principal holds, for routing.

        Falls back to the claims hint when the store is unreachable. ADMIN is
        never taken from the hint. The result only picks a landing route;
        every page behind it still goes through the access gate.

        Args:
            principal: Authenticated principal

        Returns:
            Held roles
        """
        with logfire.span("role_service.held_roles", principal_id=str(principal.id)):
            try:
                return await within_budget(
                    self.authority_store.list_roles(principal.id),
                    "roles.list",
                    self.timeout,
                )
            except AuthorityUnavailableError as e:
                hinted = set(principal.claims.roles) if principal.claims else set()
                hinted.discard(Role.ADMIN)
                logfire.warn(
                    "Role lookup failed, routing from claims hint",
                    principal_id=str(principal.id),
                    hinted_roles=sorted(r.value for r in hinted),
                    error=str(e),
                )
                return hinted

    async def select_role(self, principal: Principal, role: Role) -> None:
        """Take on a self-service role.

        SHARER also creates the principal's partition owner record.
        EXECUTOR and LISTENER delegations only come from invitations; a bare
        LISTENER role lets the principal wait for one.

        Args:
            principal: Authenticated principal
            role: SHARER or LISTENER

        Raises:
            BusinessRuleViolationError: If the role is not self-service
            ProvisioningError: If a required row could not be written
        """
        with logfire.span(
            "role_service.select_role",
            principal_id=str(principal.id),
            role=role.value,
        ):
            if role not in SELF_SERVICE_ROLES:
                raise BusinessRuleViolationError(
                    f"Role {role.value} cannot be selected directly"
                )

            await self.upsert.apply(
                "profile",
                lambda path: path.ensure_profile(
                    Profile(id=principal.id, email=principal.email)
                ),
            )

            if role is Role.SHARER:
                await self._ensure_sharer(principal)

            await self.upsert.apply(
                f"role.{role.value}",
                lambda path: path.ensure_role(
                    RoleAssignment(
                        id=RoleAssignmentId(uuid4()), profile_id=principal.id, role=role
                    )
                ),
            )
            logfire.info(
                "Role selected", principal_id=str(principal.id), role=role.value
            )

    async def diagnose(self, principal: Principal, repair: bool = False) -> RoleDiagnosis:
        """Compare claims, role assignments and relationship rows.

        Args:
            principal: Authenticated principal
            repair: Create a missing owner record for a SHARER role holder.
                Delegations are never repaired; they need an invitation.

        Returns:
            Diagnosis report

        Raises:
            AuthorityUnavailableError: If the store could not be read
        """
        with logfire.span(
            "role_service.diagnose", principal_id=str(principal.id), repair=repair
        ):
            store_roles = await within_budget(
                self.authority_store.list_roles(principal.id), "roles.list", self.timeout
            )
            claims_roles = principal.claims.roles if principal.claims else frozenset()

            missing: list[Role] = []
            if Role.SHARER in store_roles:
                sharer = await within_budget(
                    self.authority_store.find_sharer_by_owner(principal.id),
                    "roles.find_sharer",
                    self.timeout,
                )
                if sharer is None:
                    missing.append(Role.SHARER)
            if Role.EXECUTOR in store_roles:
                links = await within_budget(
                    self.authority_store.list_executor_links(principal.id),
                    "roles.executor_links",
                    self.timeout,
                )
                if not links:
                    missing.append(Role.EXECUTOR)
            if Role.LISTENER in store_roles:
                listener_links = await within_budget(
                    self.authority_store.list_listener_links(principal.id),
                    "roles.listener_links",
                    self.timeout,
                )
                if not listener_links:
                    missing.append(Role.LISTENER)

            repaired: list[Role] = []
            if repair and Role.SHARER in missing:
                await self._ensure_sharer(principal)
                repaired.append(Role.SHARER)

            diagnosis = RoleDiagnosis(
                store_roles=frozenset(store_roles),
                claims_roles=frozenset(claims_roles),
                missing_relationships=tuple(missing),
                repaired=tuple(repaired),
            )
            if diagnosis.claims_stale or missing:
                logfire.warn(
                    "Role drift detected",
                    principal_id=str(principal.id),
                    claims_stale=diagnosis.claims_stale,
                    missing=[r.value for r in missing],
                    repaired=[r.value for r in repaired],
                )
            return diagnosis

    async def _ensure_sharer(self, principal: Principal) -> None:
        await self.upsert.apply(
            "sharer",
            lambda path: path.ensure_sharer(
                SharerProfile(
                    id=PartitionId(uuid4()),
                    profile_id=principal.id,
                    subscription_active=False,
                )
            ),
        )
