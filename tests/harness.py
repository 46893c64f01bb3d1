"""Container fixtures shared by unit, integration and E2E tests."""

import pytest_asyncio

from telloom.util.di import Component
from tests.di import build_test_container


def create_env_fixture(unmock: set[Component] | None = None):
    """Make a fixture yielding a REQUEST-scoped container.

    Each test gets a fresh container, and with it a fresh in-memory
    authority state. Fetch ``InMemoryAuthorityState`` from the container to
    seed rows that the services under test will see.

    Args:
        unmock: Components to build with their production provider

    Usage:
        unit_env = create_env_fixture()
        integration_env = create_env_fixture(unmock={"persistence"})

        @pytest.mark.asyncio
        async def test_owner_has_access(unit_env):
            state = await unit_env.get(InMemoryAuthorityState)
            gate = await unit_env.get(AccessGate)
            ...
    """

    @pytest_asyncio.fixture
    async def _environment():
        container = build_test_container(unmock=unmock)
        async with container() as request_container:
            yield request_container
        await container.close()

    return _environment
