"""Unit tests for IdempotentUpsert."""

from uuid import uuid4

import pytest

from telloom.config import AuthoritySettings
from telloom.domain.error import ProvisioningError
from telloom.domain.model import RoleAssignment
from telloom.domain.service import IdempotentUpsert
from telloom.domain.value import ProfileId, Role, RoleAssignmentId
from telloom.persistence.repository.inmemory import InMemoryAuthorityState
from tests.di.faults import FaultyDirectWriter, FaultyProcedureWriter


def role_write(profile_id: ProfileId, role: Role = Role.LISTENER):
    assignment = RoleAssignment(
        id=RoleAssignmentId(uuid4()), profile_id=profile_id, role=role
    )
    return lambda path: path.ensure_role(assignment)


def build_upsert(
    state: InMemoryAuthorityState,
    procedure_faults: dict | None = None,
    direct_faults: dict | None = None,
    timeout: float = 2.0,
) -> tuple[IdempotentUpsert, FaultyProcedureWriter, FaultyDirectWriter]:
    procedure = FaultyProcedureWriter(state, **(procedure_faults or {}))
    direct = FaultyDirectWriter(state, **(direct_faults or {}))
    upsert = IdempotentUpsert(
        paths=[procedure, direct],
        authority_settings=AuthoritySettings(query_timeout_seconds=timeout),
    )
    return upsert, procedure, direct


class TestApply:
    """Tests for apply."""

    @pytest.mark.asyncio
    async def test_procedure_path_is_preferred(self):
        """A healthy procedure path handles the write alone."""
        # Arrange
        state = InMemoryAuthorityState()
        upsert, procedure, direct = build_upsert(state)
        profile_id = ProfileId(uuid4())

        # Act
        created = await upsert.apply("role.LISTENER", role_write(profile_id))

        # Assert
        assert created is True
        assert (profile_id, Role.LISTENER) in state.roles
        assert procedure.count("ensure_role") == 1
        assert direct.calls == []

    @pytest.mark.asyncio
    async def test_falls_back_to_direct_path(self):
        """When the procedure path fails the direct path writes the row."""
        # Arrange
        state = InMemoryAuthorityState()
        upsert, procedure, direct = build_upsert(
            state, procedure_faults={"failing": {"ensure_role"}}
        )
        profile_id = ProfileId(uuid4())

        # Act
        created = await upsert.apply("role.LISTENER", role_write(profile_id))

        # Assert
        assert created is True
        assert (profile_id, Role.LISTENER) in state.roles
        assert procedure.count("ensure_role") == 1
        assert direct.count("ensure_role") == 1

    @pytest.mark.asyncio
    async def test_slow_procedure_path_falls_back(self):
        """A procedure call exceeding the budget is treated as failed."""
        # Arrange
        state = InMemoryAuthorityState()
        upsert, _, direct = build_upsert(
            state,
            procedure_faults={"slow": {"ensure_role"}, "delay": 0.5},
            timeout=0.05,
        )
        profile_id = ProfileId(uuid4())

        # Act
        created = await upsert.apply("role.LISTENER", role_write(profile_id))

        # Assert
        assert created is True
        assert direct.count("ensure_role") == 1

    @pytest.mark.asyncio
    async def test_existing_row_is_success(self):
        """Writing a row that already exists reports not-created, no error."""
        # Arrange
        state = InMemoryAuthorityState()
        upsert, _, _ = build_upsert(state)
        profile_id = ProfileId(uuid4())
        await upsert.apply("role.LISTENER", role_write(profile_id))

        # Act
        created = await upsert.apply("role.LISTENER", role_write(profile_id))

        # Assert
        assert created is False
        assert len(state.roles) == 1

    @pytest.mark.asyncio
    async def test_unique_violation_is_already_exists(self):
        """Losing a race on the unique key is success, not an error."""
        # Arrange
        state = InMemoryAuthorityState()
        upsert, _, direct = build_upsert(
            state, procedure_faults={"conflicting": {"ensure_role"}}
        )

        # Act
        created = await upsert.apply("role.LISTENER", role_write(ProfileId(uuid4())))

        # Assert - no fallback attempt after a conflict
        assert created is False
        assert direct.calls == []

    @pytest.mark.asyncio
    async def test_all_paths_failing_raises(self):
        """When every path fails the step is reported as failed."""
        # Arrange
        state = InMemoryAuthorityState()
        upsert, _, _ = build_upsert(
            state,
            procedure_faults={"failing": {"ensure_role"}},
            direct_faults={"failing": {"ensure_role"}},
        )

        # Act & Assert
        with pytest.raises(ProvisioningError) as exc_info:
            await upsert.apply("role.LISTENER", role_write(ProfileId(uuid4())))

        assert exc_info.value.step == "role.LISTENER"
        assert len(exc_info.value.failures) == 2
        assert exc_info.value.failures[0].startswith("procedure:")
        assert exc_info.value.failures[1].startswith("direct:")
        assert state.roles == {}
