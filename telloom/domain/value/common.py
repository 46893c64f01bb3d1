"""Base classes for access core value objects."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, RootModel


class ValueObject(BaseModel):
    """Immutable result or snapshot compared by value.

    Used for claim snapshots, acceptance results and role diagnoses.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )


T = TypeVar("T")


class RootValueObject(RootModel[T], Generic[T]):
    """Single validated value such as an invitation token or an email.

    The wrapped value is ``.root`` and ``model_dump()`` returns it bare, so
    these serialize as plain strings in API responses.
    """

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.root)

    def preview(self, keep: int = 8) -> str:
        """Leading characters only, for log attributes."""
        return f"{str(self.root)[:keep]}..."
