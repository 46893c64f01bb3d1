"""Landing route selection."""

from typing import Iterable, Optional

from telloom.domain.value import Role, Route

# Highest priority first
ROLE_PRIORITY: tuple[tuple[Role, Route], ...] = (
    (Role.ADMIN, Route.ADMIN),
    (Role.SHARER, Route.SHARER),
    (Role.EXECUTOR, Route.EXECUTOR),
    (Role.LISTENER, Route.LISTENER),
)

_ROUTE_BY_ROLE = dict(ROLE_PRIORITY)


class RoleRouter:
    """Maps a held role set to exactly one landing route.

    Only role membership is considered, never delegation counts.
    """

    def route_for(self, roles: Iterable[Role]) -> Route:
        """Pick the landing route for a role set.

        Args:
            roles: Roles held by the principal

        Returns:
            Route of the highest-priority held role, or onboarding when none
        """
        held = set(roles)
        for role, route in ROLE_PRIORITY:
            if role in held:
                return route
        return Route.ONBOARDING

    def route_for_context(
        self, roles: Iterable[Role], active_role: Optional[Role]
    ) -> Route:
        """Pick the landing route, honouring an explicitly chosen role.

        The active role only wins if the principal actually holds it.
        """
        held = set(roles)
        if active_role is not None and active_role in held:
            return _ROUTE_BY_ROLE[active_role]
        return self.route_for(held)
