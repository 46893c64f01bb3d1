"""Infrastructure providers.

The production subclass is imported here so that get_provider sees it
among the base's __subclasses__().
"""

from .persistence import PersistenceProvider, ProdPersistenceProvider

__all__ = [
    "PersistenceProvider",
    "ProdPersistenceProvider",
]
