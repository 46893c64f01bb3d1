"""Relationship write paths.

Provisioning writes go through one of two interchangeable paths: privileged
stored procedures, or direct privileged inserts. Both produce the same row
shape and both are create-if-absent: a matching unique key means the row
already exists, which is success.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import ClassVar

from telloom.domain.model import (
    ExecutorLink,
    ListenerLink,
    Profile,
    RoleAssignment,
    SharerProfile,
)
from telloom.domain.value import InvitationId, InvitationStatus


class RelationshipWriter(ABC):
    """One write path for provisioning rows.

    Every ensure_* method returns True if it created the row and False if a
    row with the same unique key already existed.

    Raises:
        AuthorityUnavailableError: From any method, when the path fails
    """

    path_name: ClassVar[str] = "unknown"

    @abstractmethod
    async def ensure_profile(self, profile: Profile) -> bool:
        """Create the base profile unless one exists for its ID."""
        pass

    @abstractmethod
    async def ensure_sharer(self, sharer: SharerProfile) -> bool:
        """Create the owner record unless the profile already owns one."""
        pass

    @abstractmethod
    async def ensure_role(self, assignment: RoleAssignment) -> bool:
        """Create the role assignment unless (profile, role) exists."""
        pass

    @abstractmethod
    async def ensure_executor_link(self, link: ExecutorLink) -> bool:
        """Create the executor link unless (executor, sharer) exists."""
        pass

    @abstractmethod
    async def ensure_listener_link(self, link: ListenerLink) -> bool:
        """Create the listener link unless (listener, sharer) exists."""
        pass

    @abstractmethod
    async def mark_invitation(
        self, invitation_id: InvitationId, status: InvitationStatus, at: datetime
    ) -> bool:
        """Move a PENDING invitation to a terminal status.

        Conditional on the invitation still being PENDING.

        Returns:
            True if this call moved it, False if it was no longer pending
        """
        pass


class ProcedureWritePath(RelationshipWriter):
    """Write path backed by privileged stored procedures."""

    path_name = "procedure"


class DirectWritePath(RelationshipWriter):
    """Write path backed by direct privileged inserts and updates."""

    path_name = "direct"
