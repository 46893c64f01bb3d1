"""Role consistency report."""

from telloom.domain.value import Role
from telloom.domain.value.common import ValueObject


class RoleDiagnosis(ValueObject):
    """Drift between a principal's claims hint, role assignments and rows.

    missing_relationships names roles held without the row that backs them,
    e.g. SHARER without an owner record.
    """

    store_roles: frozenset[Role]
    claims_roles: frozenset[Role]
    missing_relationships: tuple[Role, ...] = ()
    repaired: tuple[Role, ...] = ()

    @property
    def claims_stale(self) -> bool:
        """Whether the session claims disagree with the store."""
        return self.store_roles != self.claims_roles
