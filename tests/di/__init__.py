"""Test providers.

Importing this package registers MockPersistenceProvider as the mock
implementation of the persistence component.
"""

from .container import build_test_container
from .persistence import MockPersistenceProvider

__all__ = [
    "MockPersistenceProvider",
    "build_test_container",
]
