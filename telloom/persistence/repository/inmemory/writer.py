"""In-memory write paths for testing."""

from datetime import datetime

from telloom.domain.model import (
    ExecutorLink,
    ListenerLink,
    Profile,
    RoleAssignment,
    SharerProfile,
)
from telloom.domain.repository import DirectWritePath, ProcedureWritePath
from telloom.domain.value import InvitationId, InvitationStatus

from .state import InMemoryAuthorityState


class _InMemoryWrites:
    """Create-if-absent writes against the shared in-memory state."""

    def __init__(self, state: InMemoryAuthorityState) -> None:
        self._state = state

    async def ensure_profile(self, profile: Profile) -> bool:
        if profile.id in self._state.profiles:
            return False
        self._state.profiles[profile.id] = profile
        return True

    async def ensure_sharer(self, sharer: SharerProfile) -> bool:
        for existing in self._state.sharers.values():
            if existing.profile_id == sharer.profile_id:
                return False
        self._state.sharers[sharer.id] = sharer
        return True

    async def ensure_role(self, assignment: RoleAssignment) -> bool:
        key = (assignment.profile_id, assignment.role)
        if key in self._state.roles:
            return False
        self._state.roles[key] = assignment
        return True

    async def ensure_executor_link(self, link: ExecutorLink) -> bool:
        key = (link.executor_id, link.sharer_id)
        if key in self._state.executor_links:
            return False
        self._state.executor_links[key] = link
        return True

    async def ensure_listener_link(self, link: ListenerLink) -> bool:
        key = (link.listener_id, link.sharer_id)
        if key in self._state.listener_links:
            return False
        self._state.listener_links[key] = link
        return True

    async def mark_invitation(
        self, invitation_id: InvitationId, status: InvitationStatus, at: datetime
    ) -> bool:
        invitation = self._state.invitations.get(invitation_id)
        if invitation is None or invitation.status is not InvitationStatus.PENDING:
            return False
        self._state.invitations[invitation_id] = invitation.transition_to(status, at)
        return True


class InMemoryProcedureWriter(_InMemoryWrites, ProcedureWritePath):
    """In-memory stand-in for the procedure write path."""

    pass


class InMemoryDirectWriter(_InMemoryWrites, DirectWritePath):
    """In-memory stand-in for the direct write path."""

    pass
