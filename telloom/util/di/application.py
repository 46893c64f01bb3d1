"""Application layer DI providers."""

from dishka import Scope, provide

from telloom.application.usecase.access import CheckAccessUseCase, ResolveContextUseCase
from telloom.application.usecase.invitation import (
    AcceptInvitationUseCase,
    CreateInvitationUseCase,
    DeclineInvitationUseCase,
    ListInvitationsUseCase,
    RevokeInvitationUseCase,
    ValidateInvitationUseCase,
)
from telloom.application.usecase.role import (
    DiagnoseRolesUseCase,
    GetRouteUseCase,
    SelectRoleUseCase,
)
from telloom.config import Settings
from telloom.domain.service import (
    AccessGate,
    AuthorityResolver,
    InvitationProvisioner,
    InvitationService,
    RoleRouter,
    RoleService,
)
from telloom.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Access use cases
    @provide(scope=Scope.REQUEST)
    def get_resolve_context_use_case(
        self,
        authority_resolver: AuthorityResolver,
        role_service: RoleService,
        role_router: RoleRouter,
    ) -> ResolveContextUseCase:
        """Provide resolve context use case."""
        return ResolveContextUseCase(
            authority_resolver=authority_resolver,
            role_service=role_service,
            role_router=role_router,
        )

    @provide(scope=Scope.REQUEST)
    def get_check_access_use_case(self, access_gate: AccessGate) -> CheckAccessUseCase:
        """Provide check access use case."""
        return CheckAccessUseCase(access_gate=access_gate)

    # Invitation use cases
    @provide(scope=Scope.REQUEST)
    def get_create_invitation_use_case(
        self, invitation_service: InvitationService, settings: Settings
    ) -> CreateInvitationUseCase:
        """Provide create invitation use case."""
        return CreateInvitationUseCase(
            invitation_service=invitation_service, settings=settings
        )

    @provide(scope=Scope.REQUEST)
    def get_validate_invitation_use_case(
        self, invitation_service: InvitationService, settings: Settings
    ) -> ValidateInvitationUseCase:
        """Provide validate invitation use case."""
        return ValidateInvitationUseCase(
            invitation_service=invitation_service, settings=settings
        )

    @provide(scope=Scope.REQUEST)
    def get_accept_invitation_use_case(
        self,
        invitation_service: InvitationService,
        invitation_provisioner: InvitationProvisioner,
        role_service: RoleService,
        role_router: RoleRouter,
    ) -> AcceptInvitationUseCase:
        """Provide accept invitation use case."""
        return AcceptInvitationUseCase(
            invitation_service=invitation_service,
            invitation_provisioner=invitation_provisioner,
            role_service=role_service,
            role_router=role_router,
        )

    @provide(scope=Scope.REQUEST)
    def get_decline_invitation_use_case(
        self, invitation_service: InvitationService, settings: Settings
    ) -> DeclineInvitationUseCase:
        """Provide decline invitation use case."""
        return DeclineInvitationUseCase(
            invitation_service=invitation_service, settings=settings
        )

    @provide(scope=Scope.REQUEST)
    def get_revoke_invitation_use_case(
        self, invitation_service: InvitationService, settings: Settings
    ) -> RevokeInvitationUseCase:
        """Provide revoke invitation use case."""
        return RevokeInvitationUseCase(
            invitation_service=invitation_service, settings=settings
        )

    @provide(scope=Scope.REQUEST)
    def get_list_invitations_use_case(
        self, invitation_service: InvitationService, settings: Settings
    ) -> ListInvitationsUseCase:
        """Provide list invitations use case."""
        return ListInvitationsUseCase(
            invitation_service=invitation_service, settings=settings
        )

    # Role use cases
    @provide(scope=Scope.REQUEST)
    def get_select_role_use_case(
        self, role_service: RoleService, role_router: RoleRouter
    ) -> SelectRoleUseCase:
        """Provide select role use case."""
        return SelectRoleUseCase(role_service=role_service, role_router=role_router)

    @provide(scope=Scope.REQUEST)
    def get_get_route_use_case(
        self, role_service: RoleService, role_router: RoleRouter
    ) -> GetRouteUseCase:
        """Provide get route use case."""
        return GetRouteUseCase(role_service=role_service, role_router=role_router)

    @provide(scope=Scope.REQUEST)
    def get_diagnose_roles_use_case(
        self, role_service: RoleService
    ) -> DiagnoseRolesUseCase:
        """Provide diagnose roles use case."""
        return DiagnoseRolesUseCase(role_service=role_service)
