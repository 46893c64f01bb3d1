"""Invitation acceptance provisioning.

Turns a pending invitation into durable relationship rows. Every write is
create-if-absent and goes through IdempotentUpsert, so a retried or
concurrent acceptance converges on the same rows. The primary delegation is
the contractual deliverable; everything after it is best-effort.
"""

from datetime import timedelta
from typing import Optional
from uuid import uuid4

import logfire

from telloom.config import AuthoritySettings, InvitationSettings
from telloom.domain.error import AuthorityUnavailableError, ProvisioningError
from telloom.domain.model import (
    AcceptanceResult,
    ExecutorLink,
    Invitation,
    ListenerLink,
    Principal,
    Profile,
    RoleAssignment,
    utcnow,
)
from telloom.domain.repository import InvitationRepository, PrivilegedAuthorityStore
from telloom.domain.value import (
    AcceptanceRejection,
    ExecutorLinkId,
    InvitationStatus,
    ListenerLinkId,
    PartitionId,
    ProfileId,
    Role,
    RoleAssignmentId,
)

from .base import Service, within_budget
from .idempotent_upsert import IdempotentUpsert


def _normalize_email(email: Optional[str]) -> Optional[str]:
    return email.strip().lower() if email else None


class InvitationProvisioner(Service):
    """Domain service for invitation acceptance."""

    def __init__(
        self,
        invitation_repository: InvitationRepository,
        privileged_store: PrivilegedAuthorityStore,
        upsert: IdempotentUpsert,
        authority_settings: AuthoritySettings,
        invitation_settings: InvitationSettings,
    ) -> None:
        """Initialize invitation provisioner.

        Args:
            invitation_repository: Privileged invitation lookups
            privileged_store: Privileged authority lookups (partition existence)
            upsert: Two-path create-if-absent writer
            authority_settings: Store call budget
            invitation_settings: Invitation expiry window
        """
        self.invitation_repository = invitation_repository
        self.privileged_store = privileged_store
        self.upsert = upsert
        self.timeout = authority_settings.query_timeout_seconds
        self.expiry: Optional[timedelta] = (
            timedelta(days=invitation_settings.expiry_days)
            if invitation_settings.expiry_days
            else None
        )

    async def accept_invitation(
        self, invitation: Invitation, principal: Principal
    ) -> AcceptanceResult:
        """Accept an invitation on behalf of a principal.

        Steps:
        1. Re-read the stored invitation and validate it (status, email,
           expiry, partition); reject without writing
        2. Ensure the principal's base profile
        3. Ensure the invited role assignment
        4. Ensure the primary delegation link
        5. EXECUTOR only: ensure a listener link and the LISTENER role
        6. Mark the invitation ACCEPTED

        Failures in steps 2, 3, 5 and 6 are recorded in incomplete_steps
        and never undo earlier writes.

        Args:
            invitation: The invitation being accepted
            principal: The accepting principal

        Returns:
            Acceptance result; accepted is False only for validation denials

        Raises:
            AuthorityUnavailableError: If the stored invitation could not be
                read. Nothing is written.
            ProvisioningError: If the primary delegation could not be written
                on any path. The invitation stays PENDING and the call can be
                retried.
        """
        with logfire.span(
            "invitation_provisioner.accept_invitation",
            invitation_id=str(invitation.id),
            principal_id=str(principal.id),
        ):
            current = await self._refresh(invitation)
            if current is None:
                return self._deny(AcceptanceRejection.INVITATION_NOT_FOUND, invitation, principal)

            rejection = await self._validate(current, principal)
            if rejection is not None:
                return self._deny(rejection, current, principal)

            incomplete: list[str] = []
            now = utcnow()

            await self._best_effort(
                "profile",
                lambda path: path.ensure_profile(
                    Profile(id=principal.id, email=principal.email, created_at=now)
                ),
                incomplete,
            )
            await self._ensure_role(principal.id, current.role, incomplete)

            if current.role is Role.EXECUTOR:
                await self.upsert.apply(
                    "executor_link",
                    lambda path: path.ensure_executor_link(
                        ExecutorLink(
                            id=ExecutorLinkId(uuid4()),
                            executor_id=principal.id,
                            sharer_id=current.sharer_id,
                            created_at=now,
                        )
                    ),
                )
                # Executors always get read access as well
                await self._best_effort(
                    "listener_link",
                    lambda path: path.ensure_listener_link(
                        self._listener_link(principal.id, current.sharer_id)
                    ),
                    incomplete,
                )
                await self._ensure_role(principal.id, Role.LISTENER, incomplete)
            else:
                await self.upsert.apply(
                    "listener_link",
                    lambda path: path.ensure_listener_link(
                        self._listener_link(principal.id, current.sharer_id)
                    ),
                )

            await self._mark_accepted(current, incomplete)

            logfire.info(
                "Invitation accepted",
                invitation_id=str(current.id),
                principal_id=str(principal.id),
                partition_id=str(current.sharer_id),
                role=current.role.value,
                incomplete_steps=incomplete,
            )
            return AcceptanceResult(
                accepted=True,
                partition_id=current.sharer_id,
                role=current.role,
                incomplete_steps=tuple(incomplete),
            )

    async def _refresh(self, invitation: Invitation) -> Optional[Invitation]:
        """Re-read the stored invitation; the caller's copy is never trusted.

        Raises:
            AuthorityUnavailableError: If the stored invitation cannot be read
        """
        try:
            return await within_budget(
                self.invitation_repository.find_by_id(invitation.id),
                "invitation.find_by_id",
                self.timeout,
            )
        except AuthorityUnavailableError as e:
            logfire.warn(
                "Could not refresh invitation, refusing to provision",
                invitation_id=str(invitation.id),
                error=str(e),
            )
            raise

    async def _validate(
        self, invitation: Invitation, principal: Principal
    ) -> Optional[AcceptanceRejection]:
        # Status first: a consumed invitation reports its state to anyone
        if invitation.status is not InvitationStatus.PENDING:
            return AcceptanceRejection.for_status(invitation.status)

        if _normalize_email(principal.email) != invitation.invitee_email.root:
            return AcceptanceRejection.EMAIL_MISMATCH

        if invitation.is_expired(self.expiry, utcnow()):
            return AcceptanceRejection.INVITATION_EXPIRED

        try:
            sharer = await within_budget(
                self.privileged_store.find_sharer(invitation.sharer_id),
                "invitation.find_sharer",
                self.timeout,
            )
        except AuthorityUnavailableError as e:
            # Not verifiably absent; the link write will surface a real problem
            logfire.warn(
                "Could not verify partition, continuing",
                partition_id=str(invitation.sharer_id),
                error=str(e),
            )
            return None

        if sharer is None:
            return AcceptanceRejection.PARTITION_NOT_FOUND
        return None

    async def _ensure_role(
        self, profile_id: ProfileId, role: Role, incomplete: list[str]
    ) -> None:
        await self._best_effort(
            f"role.{role.value}",
            lambda path: path.ensure_role(
                RoleAssignment(
                    id=RoleAssignmentId(uuid4()), profile_id=profile_id, role=role
                )
            ),
            incomplete,
        )

    async def _mark_accepted(self, invitation: Invitation, incomplete: list[str]) -> None:
        try:
            moved = await self.upsert.apply(
                "mark_accepted",
                lambda path: path.mark_invitation(
                    invitation.id, InvitationStatus.ACCEPTED, utcnow()
                ),
            )
        except ProvisioningError as e:
            logfire.error(
                "Failed to mark invitation accepted",
                invitation_id=str(invitation.id),
                failures=e.failures,
            )
            incomplete.append("mark_accepted")
            return

        if not moved:
            logfire.warn(
                "Invitation was no longer pending when marking accepted",
                invitation_id=str(invitation.id),
            )

    async def _best_effort(self, step: str, write, incomplete: list[str]) -> None:
        try:
            await self.upsert.apply(step, write)
        except ProvisioningError as e:
            logfire.error(
                "Provisioning step incomplete",
                step=step,
                failures=e.failures,
            )
            incomplete.append(step)

    @staticmethod
    def _listener_link(listener_id: ProfileId, sharer_id: PartitionId) -> ListenerLink:
        return ListenerLink(
            id=ListenerLinkId(uuid4()), listener_id=listener_id, sharer_id=sharer_id
        )

    @staticmethod
    def _deny(
        reason: AcceptanceRejection, invitation: Invitation, principal: Principal
    ) -> AcceptanceResult:
        logfire.info(
            "Invitation acceptance rejected",
            reason=reason.value,
            invitation_id=str(invitation.id),
            principal_id=str(principal.id),
        )
        return AcceptanceResult.denied(reason)
