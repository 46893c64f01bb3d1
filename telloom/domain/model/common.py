"""Base model for access core entities."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for profiles, delegation links, invitations and principals.

    Entities are frozen and reject unknown fields. A changed entity is a new
    object built by ``evolve``; persisting it is up to a repository or writer.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",  # Mappers must name every column they carry over
        arbitrary_types_allowed=True,  # Allow custom value objects
    )

    def evolve(self, **changes: Any) -> Self:
        """Return a validated copy with ``changes`` applied.

        Field validators run again, so a transition cannot produce an entity
        the constructor would have refused.
        """
        return type(self).model_validate({**dict(self), **changes})
