"""Provider base carrying mock metadata."""

from typing import ClassVar, Literal

from dishka import Provider

# Components that tests can swap for an in-memory implementation
Component = Literal["persistence"]


class ProviderBase(Provider):
    """Base for every provider in PROVIDERS.

    A mockable component declares a base with ``__mock_component__`` set
    and two subclasses, one per value of ``__is_mock__``. Concrete
    providers leave both attributes at their defaults.
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False
