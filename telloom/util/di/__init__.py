"""Dependency injection for the access core.

The container is assembled from four providers. Config, domain services
and use cases are always the production ones. Persistence is a mockable
component: the production provider talks to PostgreSQL over the standard
and privileged connections, the test provider (``tests/di``) swaps in the
in-memory authority state.
"""

from typing import Type

from telloom.util.di.application import ProdApplicationProvider
from telloom.util.di.base import Component, ProviderBase
from telloom.util.di.core import ProdConfigProvider
from telloom.util.di.domain import ProdDomainProvider
from telloom.util.di.infrastructure import PersistenceProvider, ProdPersistenceProvider

# Container assembly order; mockable bases are resolved by get_provider
PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    PersistenceProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Pick the provider class to instantiate for a base.

    A base without subclasses is concrete and used as-is. A base with
    subclasses is a mockable component, and the subclass whose
    ``__is_mock__`` flag matches ``use_mock`` is chosen. Mock subclasses
    only exist once ``tests.di`` has been imported.

    Args:
        base: Provider base class from PROVIDERS
        use_mock: Whether the mock implementation is wanted

    Returns:
        Provider class (not instantiated)

    Raises:
        ValueError: If the component has no implementation of that kind
    """
    implementations = base.__subclasses__()
    if not implementations:
        return base

    for implementation in implementations:
        if getattr(implementation, "__is_mock__", False) == use_mock:
            return implementation

    kind = "mock" if use_mock else "production"
    component = getattr(base, "__mock_component__", None) or base.__name__
    raise ValueError(f"No {kind} implementation for {component}")


__all__ = [
    "Component",
    "PROVIDERS",
    "PersistenceProvider",
    "ProdApplicationProvider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdPersistenceProvider",
    "ProviderBase",
    "get_provider",
]
