"""Integration tests for the PostgreSQL authority repositories.

Requires a migrated database at the configured URLs. Set
TELLOOM_INTEGRATION=1 to run them.
"""

import os
from uuid import uuid4

import pytest
from sqlalchemy import text

from telloom.config import Settings
from telloom.domain.error import AuthorityUnavailableError
from telloom.domain.model import (
    ExecutorLink,
    Profile,
    SharerProfile,
    utcnow,
)
from telloom.domain.repository import (
    AuthorityProcedures,
    DirectWritePath,
    InvitationRepository,
    PrivilegedAuthorityStore,
    ProcedureWritePath,
)
from telloom.domain.value import (
    ExecutorLinkId,
    InvitationStatus,
    PartitionId,
    ProfileId,
)
from telloom.persistence.database import PrivilegedSession
from telloom.persistence.repository.base import PostgresRepository
from tests.conftest import make_invitation
from tests.harness import create_env_fixture

pytestmark = pytest.mark.skipif(
    not os.environ.get("TELLOOM_INTEGRATION"),
    reason="set TELLOOM_INTEGRATION=1 to run against PostgreSQL",
)

# Integration test fixture
integration_env = create_env_fixture(unmock={"persistence"})


async def create_partition(writer: DirectWritePath) -> tuple[Profile, SharerProfile]:
    profile = Profile(id=ProfileId(uuid4()), email=f"{uuid4().hex}@example.com")
    sharer = SharerProfile(id=PartitionId(uuid4()), profile_id=profile.id)
    await writer.ensure_profile(profile)
    await writer.ensure_sharer(sharer)
    return profile, sharer


class TestRelationshipWriters:
    """Idempotent writes through both write paths."""

    @pytest.mark.asyncio
    async def test_direct_writes_are_idempotent(self, integration_env):
        # Arrange
        writer = await integration_env.get(DirectWritePath)
        profile = Profile(id=ProfileId(uuid4()), email="writer@example.com")

        # Act
        first = await writer.ensure_profile(profile)
        second = await writer.ensure_profile(profile)

        # Assert
        assert first is True
        assert second is False

    @pytest.mark.asyncio
    async def test_procedure_path_writes_executor_link(self, integration_env):
        # Arrange
        direct = await integration_env.get(DirectWritePath)
        procedure = await integration_env.get(ProcedureWritePath)
        store = await integration_env.get(PrivilegedAuthorityStore)
        procedures = await integration_env.get(AuthorityProcedures)
        _, sharer = await create_partition(direct)
        executor = Profile(id=ProfileId(uuid4()), email="exec@example.com")
        await direct.ensure_profile(executor)
        link = ExecutorLink(
            id=ExecutorLinkId(uuid4()),
            executor_id=executor.id,
            sharer_id=sharer.id,
            created_at=utcnow(),
        )

        # Act
        created = await procedure.ensure_executor_link(link)
        again = await procedure.ensure_executor_link(link)

        # Assert
        assert created is True
        assert again is False
        assert await store.find_executor_link(executor.id, sharer.id) is not None
        assert await procedures.executor_partitions_for(executor.id) == [sharer.id]


class TestInvitationRepositoryIntegration:
    """Invitation persistence against PostgreSQL."""

    @pytest.mark.asyncio
    async def test_find_by_token_and_update_status(self, integration_env):
        # Arrange
        direct = await integration_env.get(DirectWritePath)
        repo = await integration_env.get(InvitationRepository)
        owner, sharer = await create_partition(direct)
        invitation = make_invitation(
            sharer.id, "friend@example.com", inviter_id=owner.id
        )
        await repo.save(invitation)

        # Act
        found = await repo.find_by_token(invitation.token)
        moved = await repo.update_status(
            invitation.id, InvitationStatus.ACCEPTED, utcnow()
        )
        moved_again = await repo.update_status(
            invitation.id, InvitationStatus.REVOKED, utcnow()
        )

        # Assert
        assert found is not None
        assert found.id == invitation.id
        assert found.invitee_email == invitation.invitee_email
        assert moved is True
        assert moved_again is False

        stored = await repo.find_by_id(invitation.id)
        assert stored is not None
        assert stored.status == InvitationStatus.ACCEPTED
        assert stored.accepted_at is not None


class TestStatementTimeout:
    """Slow statements are ended by the database, not the client."""

    @pytest.mark.asyncio
    async def test_timed_out_statement_leaves_session_usable(self, integration_env):
        """A statement past the limit fails alone; the next write path still works."""
        # Arrange
        settings = await integration_env.get(Settings)
        session = await integration_env.get(PrivilegedSession)
        direct = await integration_env.get(DirectWritePath)
        repo = PostgresRepository(session)
        stall = settings.authority.query_timeout_seconds

        # Act & Assert
        with pytest.raises(AuthorityUnavailableError, match="statement timeout"):
            await repo._run(
                "stall", text("SELECT pg_sleep(:seconds)").bindparams(seconds=stall)
            )

        profile = Profile(id=ProfileId(uuid4()), email="after-timeout@example.com")
        assert await direct.ensure_profile(profile) is True
