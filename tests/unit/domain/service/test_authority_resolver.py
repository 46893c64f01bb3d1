"""Unit tests for AuthorityResolver."""

from datetime import timedelta
from uuid import uuid4

import pytest

from telloom.config import AuthoritySettings
from telloom.domain.model import ClaimsSnapshot, utcnow
from telloom.domain.service import AccessGate, AuthorityResolver, default_authority_chain
from telloom.domain.value import PartitionId, Role
from telloom.persistence.repository.inmemory import InMemoryAuthorityState
from tests.conftest import make_principal, seed_executor, seed_listener, seed_sharer
from tests.di.faults import FaultyAuthorityProcedures, FaultyAuthorityStore
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class ResolverFixture:
    """Resolver wired to fault-injecting doubles over one state."""

    def __init__(
        self,
        state: InMemoryAuthorityState,
        store_faults: dict | None = None,
        procedure_faults: dict | None = None,
        privileged_faults: dict | None = None,
        timeout: float = 2.0,
    ) -> None:
        settings = AuthoritySettings(query_timeout_seconds=timeout)
        self.store = FaultyAuthorityStore(state, **(store_faults or {}))
        self.procedures = FaultyAuthorityProcedures(state, **(procedure_faults or {}))
        self.privileged = FaultyAuthorityStore(state, **(privileged_faults or {}))
        self.gate = AccessGate(self.store, self.procedures, settings)
        self.resolver = AuthorityResolver(
            access_gate=self.gate,
            providers=default_authority_chain(
                self.store, self.procedures, self.privileged
            ),
            authority_settings=settings,
        )


class TestResolveEffectivePartition:
    """Tests for resolve_effective_partition."""

    @pytest.mark.asyncio
    async def test_owner_resolves_to_own_partition(self):
        """A sharer with no claims hint resolves through ownership."""
        # Arrange
        state = InMemoryAuthorityState()
        owner = make_principal("owner@example.com")
        sharer = seed_sharer(state, owner)
        fx = ResolverFixture(state)

        # Act
        result = await fx.resolver.resolve_effective_partition(owner)

        # Assert
        assert result == sharer.id
        assert fx.procedures.count("executor_partitions_for") == 0
        assert fx.privileged.calls == []

    @pytest.mark.asyncio
    async def test_verified_claims_hint_short_circuits_lookups(self):
        """A hint that verifies is used without the remaining providers."""
        # Arrange
        state = InMemoryAuthorityState()
        owner = make_principal("owner@example.com")
        sharer = seed_sharer(state, owner)
        hint = ClaimsSnapshot(roles=frozenset({Role.SHARER}), sharer_id=sharer.id)
        principal = owner.model_copy(update={"claims": hint})
        fx = ResolverFixture(state)

        # Act
        result = await fx.resolver.resolve_effective_partition(principal)

        # Assert
        assert result == sharer.id
        assert fx.store.calls == ["find_sharer"]

    @pytest.mark.asyncio
    async def test_claims_hint_alone_is_never_sufficient(self):
        """A hint naming a partition the principal does not own resolves nothing."""
        # Arrange
        state = InMemoryAuthorityState()
        someone_else = seed_sharer(state, make_principal("owner@example.com"))
        principal = make_principal(
            "impostor@example.com",
            claims=ClaimsSnapshot(
                roles=frozenset({Role.SHARER}), sharer_id=someone_else.id
            ),
        )
        fx = ResolverFixture(state)

        # Act
        result = await fx.resolver.resolve_effective_partition(principal)

        # Assert - every provider ran, none trusted the hint
        assert result is None
        assert fx.store.count("find_sharer") == 1
        assert fx.store.count("find_sharer_by_owner") == 1
        assert fx.procedures.count("executor_partitions_for") == 1
        assert fx.privileged.count("find_sharer_by_owner") == 1
        assert fx.privileged.count("list_executor_links") == 1

    @pytest.mark.asyncio
    async def test_stale_hint_falls_through_to_delegation(self):
        """A hint for a partition that no longer exists is skipped."""
        # Arrange
        state = InMemoryAuthorityState()
        sharer = seed_sharer(state, make_principal("owner@example.com"))
        executor = make_principal(
            "exec@example.com",
            claims=ClaimsSnapshot(
                roles=frozenset({Role.SHARER}), sharer_id=PartitionId(uuid4())
            ),
        )
        seed_executor(state, executor.id, sharer.id)
        fx = ResolverFixture(state)

        # Act
        result = await fx.resolver.resolve_effective_partition(executor)

        # Assert
        assert result == sharer.id

    @pytest.mark.asyncio
    async def test_executor_resolves_to_newest_delegation(self):
        """With several executor links the most recent one wins."""
        # Arrange
        state = InMemoryAuthorityState()
        older = seed_sharer(state, make_principal("a@example.com"))
        newer = seed_sharer(state, make_principal("b@example.com"))
        executor = make_principal("exec@example.com")
        now = utcnow()
        seed_executor(state, executor.id, older.id, created_at=now - timedelta(days=3))
        seed_executor(state, executor.id, newer.id, created_at=now)
        fx = ResolverFixture(state)

        # Act
        result = await fx.resolver.resolve_effective_partition(executor)

        # Assert
        assert result == newer.id

    @pytest.mark.asyncio
    async def test_equal_timestamps_break_ties_by_partition_id(self):
        """Links created at the same instant resolve to the lowest partition id."""
        # Arrange
        state = InMemoryAuthorityState()
        first = seed_sharer(state, make_principal("a@example.com"))
        second = seed_sharer(state, make_principal("b@example.com"))
        executor = make_principal("exec@example.com")
        now = utcnow()
        seed_executor(state, executor.id, first.id, created_at=now)
        seed_executor(state, executor.id, second.id, created_at=now)
        fx = ResolverFixture(state)

        # Act
        result = await fx.resolver.resolve_effective_partition(executor)

        # Assert
        assert result == min(first.id, second.id, key=str)

    @pytest.mark.asyncio
    async def test_listener_only_resolves_to_none(self):
        """Listener links do not make a partition effective."""
        # Arrange
        state = InMemoryAuthorityState()
        sharer = seed_sharer(state, make_principal("owner@example.com"))
        listener = make_principal("listener@example.com")
        seed_listener(state, listener.id, sharer.id)
        fx = ResolverFixture(state)

        # Act & Assert
        assert await fx.resolver.resolve_effective_partition(listener) is None

    @pytest.mark.asyncio
    async def test_standard_path_failure_uses_bypass_ownership(self):
        """When the standard lookups fail the privileged path still resolves."""
        # Arrange
        state = InMemoryAuthorityState()
        owner = make_principal("owner@example.com")
        sharer = seed_sharer(state, owner)
        fx = ResolverFixture(
            state,
            store_faults={"failing": {"find_sharer_by_owner"}},
            procedure_faults={"failing": {"executor_partitions_for"}},
        )

        # Act
        result = await fx.resolver.resolve_effective_partition(owner)

        # Assert
        assert result == sharer.id
        assert fx.privileged.count("find_sharer_by_owner") == 1
        assert fx.privileged.count("list_executor_links") == 0

    @pytest.mark.asyncio
    async def test_bypass_delegation_is_last_resort(self):
        """The privileged delegation read resolves when everything else failed."""
        # Arrange
        state = InMemoryAuthorityState()
        sharer = seed_sharer(state, make_principal("owner@example.com"))
        executor = make_principal("exec@example.com")
        seed_executor(state, executor.id, sharer.id)
        fx = ResolverFixture(
            state,
            store_faults={"failing": {"find_sharer_by_owner"}},
            procedure_faults={"failing": {"executor_partitions_for"}},
        )

        # Act
        result = await fx.resolver.resolve_effective_partition(executor)

        # Assert
        assert result == sharer.id
        assert fx.privileged.count("list_executor_links") == 1

    @pytest.mark.asyncio
    async def test_total_outage_resolves_to_none(self):
        """With every source down the principal has no effective partition."""
        # Arrange
        state = InMemoryAuthorityState()
        owner = make_principal("owner@example.com")
        seed_sharer(state, owner)
        fx = ResolverFixture(
            state,
            store_faults={"failing": {"find_sharer", "find_sharer_by_owner"}},
            procedure_faults={"failing": {"executor_partitions_for"}},
            privileged_faults={"failing": {"find_sharer_by_owner", "list_executor_links"}},
        )

        # Act & Assert
        assert await fx.resolver.resolve_effective_partition(owner) is None

    @pytest.mark.asyncio
    async def test_slow_provider_is_skipped(self):
        """A provider exceeding the call budget counts as failed."""
        # Arrange
        state = InMemoryAuthorityState()
        owner = make_principal("owner@example.com")
        sharer = seed_sharer(state, owner)
        fx = ResolverFixture(
            state,
            store_faults={"slow": {"find_sharer_by_owner"}, "delay": 0.5},
            timeout=0.05,
        )

        # Act
        result = await fx.resolver.resolve_effective_partition(owner)

        # Assert - bypass ownership picked it up
        assert result == sharer.id
        assert fx.privileged.count("find_sharer_by_owner") == 1

    @pytest.mark.asyncio
    async def test_accessible_candidate_is_returned(self):
        """A candidate the principal may access wins over its own partition."""
        # Arrange
        state = InMemoryAuthorityState()
        owner = make_principal("owner@example.com")
        seed_sharer(state, owner)
        other = seed_sharer(state, make_principal("other@example.com"))
        seed_listener(state, owner.id, other.id)
        fx = ResolverFixture(state)

        # Act
        result = await fx.resolver.resolve_effective_partition(owner, other.id)

        # Assert
        assert result == other.id
        assert fx.store.count("find_sharer_by_owner") == 0

    @pytest.mark.asyncio
    async def test_inaccessible_candidate_is_ignored(self):
        """A candidate failing the gate falls back to the provider chain."""
        # Arrange
        state = InMemoryAuthorityState()
        owner = make_principal("owner@example.com")
        own = seed_sharer(state, owner)
        foreign = seed_sharer(state, make_principal("other@example.com"))
        fx = ResolverFixture(state)

        # Act
        result = await fx.resolver.resolve_effective_partition(owner, foreign.id)

        # Assert
        assert result == own.id


class TestResolverFromContainer:
    """The container wires the standard provider chain."""

    @pytest.mark.asyncio
    async def test_new_principal_has_no_partition(self, unit_env):
        """A principal with no rows resolves to None."""
        # Arrange
        resolver = await unit_env.get(AuthorityResolver)

        # Act & Assert
        assert await resolver.resolve_effective_partition(make_principal()) is None
