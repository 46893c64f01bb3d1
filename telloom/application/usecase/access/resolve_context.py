"""Resolve access context use case."""

from typing import Optional
from uuid import UUID

import logfire
from pydantic import BaseModel

from telloom.domain.model import Principal
from telloom.domain.service import AuthorityResolver, RoleRouter, RoleService
from telloom.domain.value import PartitionId, Role, Route


class ResolveContextRequest(BaseModel):
    """Resolve context request."""

    principal: Principal
    sharer_id: Optional[UUID] = None  # Partition the caller asked for


class ResolveContextResponse(BaseModel):
    """Resolve context response."""

    partition_id: Optional[str]
    roles: list[Role]
    route: Route


class ResolveContextUseCase:
    """Use case for working out where a principal lands and what it acts on.

    A principal with no effective partition lands on the route for its held
    roles; with no roles either, that is onboarding.
    """

    def __init__(
        self,
        authority_resolver: AuthorityResolver,
        role_service: RoleService,
        role_router: RoleRouter,
    ) -> None:
        """Initialize resolve context use case.

        Args:
            authority_resolver: Effective partition resolver
            role_service: Role domain service
            role_router: Landing route selection
        """
        self.authority_resolver = authority_resolver
        self.role_service = role_service
        self.role_router = role_router

    async def execute(self, request: ResolveContextRequest) -> ResolveContextResponse:
        """Resolve the effective partition and landing route.

        Args:
            request: Principal and optional candidate partition

        Returns:
            Effective partition (or None), held roles and landing route
        """
        principal = request.principal
        with logfire.span("resolve_context.execute", principal_id=str(principal.id)):
            candidate = PartitionId(request.sharer_id) if request.sharer_id else None
            partition_id = await self.authority_resolver.resolve_effective_partition(
                principal, candidate
            )

            roles = await self.role_service.held_roles(principal)
            route = self.role_router.route_for_context(roles, principal.active_role)

            return ResolveContextResponse(
                partition_id=str(partition_id) if partition_id else None,
                roles=sorted(roles, key=lambda r: r.value),
                route=route,
            )
