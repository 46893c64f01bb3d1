"""Unit tests for InvitationService."""

from uuid import uuid4

import pytest

from telloom.domain.error import (
    BusinessRuleViolationError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
)
from telloom.domain.repository import InvitationRepository
from telloom.domain.service import InvitationService
from telloom.domain.value import (
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    Role,
)
from telloom.persistence.repository.inmemory import InMemoryAuthorityState
from tests.conftest import (
    make_invitation,
    make_principal,
    seed_executor,
    seed_invitation,
    seed_listener,
    seed_sharer,
)
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()


def new_token() -> InvitationToken:
    return InvitationToken(uuid4().hex)


class TestCreateInvitation:
    """Tests for create_invitation."""

    @pytest.mark.asyncio
    async def test_owner_creates_invitation(self, unit_env):
        """The partition owner can invite, and the invitation is stored pending."""
        # Arrange
        state = await unit_env.get(InMemoryAuthorityState)
        service = await unit_env.get(InvitationService)
        repo = await unit_env.get(InvitationRepository)
        owner = make_principal("owner@example.com")
        sharer = seed_sharer(state, owner)

        # Act
        result = await service.create_invitation(
            owner, sharer.id, Email("Friend@Example.com"), Role.LISTENER, new_token()
        )

        # Assert
        assert result.status == InvitationStatus.PENDING
        assert result.invitee_email.root == "friend@example.com"
        assert result.inviter_id == owner.id
        assert result.sharer_id == sharer.id

        saved = await repo.find_by_id(result.id)
        assert saved is not None
        assert saved.token == result.token

    @pytest.mark.asyncio
    async def test_executor_can_invite(self, unit_env):
        """Executors manage the partition and may invite."""
        # Arrange
        state = await unit_env.get(InMemoryAuthorityState)
        service = await unit_env.get(InvitationService)
        sharer = seed_sharer(state, make_principal("owner@example.com"))
        executor = make_principal("exec@example.com")
        seed_executor(state, executor.id, sharer.id)

        # Act
        result = await service.create_invitation(
            executor, sharer.id, Email("friend@example.com"), Role.EXECUTOR, new_token()
        )

        # Assert
        assert result.inviter_id == executor.id

    @pytest.mark.asyncio
    async def test_listener_cannot_invite(self, unit_env):
        """Listeners only read; inviting is refused."""
        # Arrange
        state = await unit_env.get(InMemoryAuthorityState)
        service = await unit_env.get(InvitationService)
        sharer = seed_sharer(state, make_principal("owner@example.com"))
        listener = make_principal("listener@example.com")
        seed_listener(state, listener.id, sharer.id)

        # Act & Assert
        with pytest.raises(NotAuthorizedError):
            await service.create_invitation(
                listener,
                sharer.id,
                Email("friend@example.com"),
                Role.LISTENER,
                new_token(),
            )
        assert state.invitations == {}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [Role.SHARER, Role.ADMIN])
    async def test_uninvitable_role_rejected(self, unit_env, role):
        """Only EXECUTOR and LISTENER can be granted by invitation."""
        # Arrange
        state = await unit_env.get(InMemoryAuthorityState)
        service = await unit_env.get(InvitationService)
        owner = make_principal("owner@example.com")
        sharer = seed_sharer(state, owner)

        # Act & Assert
        with pytest.raises(BusinessRuleViolationError):
            await service.create_invitation(
                owner, sharer.id, Email("friend@example.com"), role, new_token()
            )

    @pytest.mark.asyncio
    async def test_duplicate_pending_invitation_rejected(self, unit_env):
        """One pending invitation per email and partition."""
        # Arrange
        state = await unit_env.get(InMemoryAuthorityState)
        service = await unit_env.get(InvitationService)
        owner = make_principal("owner@example.com")
        sharer = seed_sharer(state, owner)
        await service.create_invitation(
            owner, sharer.id, Email("friend@example.com"), Role.LISTENER, new_token()
        )

        # Act & Assert
        with pytest.raises(BusinessRuleViolationError, match="pending invitation"):
            await service.create_invitation(
                owner, sharer.id, Email("FRIEND@example.com"), Role.EXECUTOR, new_token()
            )

    @pytest.mark.asyncio
    async def test_reinvite_after_decline_succeeds(self, unit_env):
        """A terminal invitation does not block a new one."""
        # Arrange
        state = await unit_env.get(InMemoryAuthorityState)
        service = await unit_env.get(InvitationService)
        owner = make_principal("owner@example.com")
        sharer = seed_sharer(state, owner)
        seed_invitation(
            state,
            make_invitation(
                sharer.id, "friend@example.com", status=InvitationStatus.DECLINED
            ),
        )

        # Act
        result = await service.create_invitation(
            owner, sharer.id, Email("friend@example.com"), Role.LISTENER, new_token()
        )

        # Assert
        assert result.status == InvitationStatus.PENDING


class TestListForPartition:
    """Tests for list_for_partition."""

    @pytest.mark.asyncio
    async def test_lists_newest_first_with_status_filter(self, unit_env):
        """Managers see their partition's invitations."""
        # Arrange
        state = await unit_env.get(InMemoryAuthorityState)
        service = await unit_env.get(InvitationService)
        owner = make_principal("owner@example.com")
        sharer = seed_sharer(state, owner)
        pending = await service.create_invitation(
            owner, sharer.id, Email("a@example.com"), Role.LISTENER, new_token()
        )
        seed_invitation(
            state,
            make_invitation(sharer.id, "b@example.com", status=InvitationStatus.REVOKED),
        )

        # Act
        everything = await service.list_for_partition(owner, sharer.id)
        only_pending = await service.list_for_partition(
            owner, sharer.id, status=InvitationStatus.PENDING
        )

        # Assert
        assert len(everything) == 2
        assert [i.id for i in only_pending] == [pending.id]

    @pytest.mark.asyncio
    async def test_stranger_cannot_list(self, unit_env):
        """Non-managers are refused."""
        # Arrange
        state = await unit_env.get(InMemoryAuthorityState)
        service = await unit_env.get(InvitationService)
        sharer = seed_sharer(state, make_principal("owner@example.com"))

        # Act & Assert
        with pytest.raises(NotAuthorizedError):
            await service.list_for_partition(make_principal("x@example.com"), sharer.id)


class TestDeclineAndRevoke:
    """Tests for decline and revoke."""

    @pytest.mark.asyncio
    async def test_invitee_declines(self, unit_env):
        """The invitee can decline a pending invitation."""
        # Arrange
        state = await unit_env.get(InMemoryAuthorityState)
        service = await unit_env.get(InvitationService)
        sharer = seed_sharer(state, make_principal("owner@example.com"))
        invitation = seed_invitation(
            state, make_invitation(sharer.id, "friend@example.com")
        )

        # Act
        result = await service.decline(
            invitation.id, make_principal("Friend@example.com")
        )

        # Assert
        assert result.status == InvitationStatus.DECLINED
        assert state.invitations[invitation.id].status == InvitationStatus.DECLINED

    @pytest.mark.asyncio
    async def test_other_principal_cannot_decline(self, unit_env):
        """Only the invitee may decline."""
        # Arrange
        state = await unit_env.get(InMemoryAuthorityState)
        service = await unit_env.get(InvitationService)
        sharer = seed_sharer(state, make_principal("owner@example.com"))
        invitation = seed_invitation(
            state, make_invitation(sharer.id, "friend@example.com")
        )

        # Act & Assert
        with pytest.raises(NotAuthorizedError):
            await service.decline(invitation.id, make_principal("x@example.com"))

    @pytest.mark.asyncio
    async def test_owner_revokes(self, unit_env):
        """A manager of the partition can revoke."""
        # Arrange
        state = await unit_env.get(InMemoryAuthorityState)
        service = await unit_env.get(InvitationService)
        owner = make_principal("owner@example.com")
        sharer = seed_sharer(state, owner)
        invitation = seed_invitation(
            state, make_invitation(sharer.id, "friend@example.com")
        )

        # Act
        result = await service.revoke(invitation.id, owner)

        # Assert
        assert result.status == InvitationStatus.REVOKED

    @pytest.mark.asyncio
    async def test_revoking_terminal_invitation_fails(self, unit_env):
        """Terminal states are final."""
        # Arrange
        state = await unit_env.get(InMemoryAuthorityState)
        service = await unit_env.get(InvitationService)
        owner = make_principal("owner@example.com")
        sharer = seed_sharer(state, owner)
        invitation = seed_invitation(
            state,
            make_invitation(
                sharer.id, "friend@example.com", status=InvitationStatus.ACCEPTED
            ),
        )

        # Act & Assert
        with pytest.raises(InvalidTransitionError):
            await service.revoke(invitation.id, owner)

    @pytest.mark.asyncio
    async def test_unknown_invitation(self, unit_env):
        """Acting on a missing invitation raises NotFoundError."""
        # Arrange
        service = await unit_env.get(InvitationService)

        # Act & Assert
        with pytest.raises(NotFoundError):
            await service.revoke(InvitationId(uuid4()), make_principal("x@example.com"))
