"""Domain layer DI providers."""

from dishka import Scope, provide

from telloom.config import AuthoritySettings, AuthSettings, InvitationSettings
from telloom.domain.repository import (
    AuthorityProcedures,
    AuthorityStore,
    DirectWritePath,
    InvitationRepository,
    PrivilegedAuthorityStore,
    ProcedureWritePath,
)
from telloom.domain.service import (
    AccessGate,
    AuthorityResolver,
    IdempotentUpsert,
    InvitationProvisioner,
    InvitationService,
    JWTService,
    RoleRouter,
    RoleService,
    default_authority_chain,
)
from telloom.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_access_gate(
        self,
        authority_store: AuthorityStore,
        procedures: AuthorityProcedures,
        authority_settings: AuthoritySettings,
    ) -> AccessGate:
        """Provide access gate domain service."""
        return AccessGate(
            authority_store=authority_store,
            procedures=procedures,
            authority_settings=authority_settings,
        )

    @provide
    def get_authority_resolver(
        self,
        access_gate: AccessGate,
        authority_store: AuthorityStore,
        procedures: AuthorityProcedures,
        privileged_store: PrivilegedAuthorityStore,
        authority_settings: AuthoritySettings,
    ) -> AuthorityResolver:
        """Provide authority resolver with the standard provider chain."""
        return AuthorityResolver(
            access_gate=access_gate,
            providers=default_authority_chain(
                authority_store, procedures, privileged_store
            ),
            authority_settings=authority_settings,
        )

    @provide
    def get_idempotent_upsert(
        self,
        procedure_path: ProcedureWritePath,
        direct_path: DirectWritePath,
        authority_settings: AuthoritySettings,
    ) -> IdempotentUpsert:
        """Provide two-path writer: procedures first, direct writes as fallback."""
        return IdempotentUpsert(
            paths=[procedure_path, direct_path],
            authority_settings=authority_settings,
        )

    @provide
    def get_invitation_provisioner(
        self,
        invitation_repository: InvitationRepository,
        privileged_store: PrivilegedAuthorityStore,
        upsert: IdempotentUpsert,
        authority_settings: AuthoritySettings,
        invitation_settings: InvitationSettings,
    ) -> InvitationProvisioner:
        """Provide invitation acceptance provisioner."""
        return InvitationProvisioner(
            invitation_repository=invitation_repository,
            privileged_store=privileged_store,
            upsert=upsert,
            authority_settings=authority_settings,
            invitation_settings=invitation_settings,
        )

    @provide
    def get_invitation_service(
        self, invitation_repository: InvitationRepository, access_gate: AccessGate
    ) -> InvitationService:
        """Provide invitation domain service."""
        return InvitationService(
            invitation_repository=invitation_repository, access_gate=access_gate
        )

    @provide
    def get_role_service(
        self,
        authority_store: AuthorityStore,
        upsert: IdempotentUpsert,
        authority_settings: AuthoritySettings,
    ) -> RoleService:
        """Provide role domain service."""
        return RoleService(
            authority_store=authority_store,
            upsert=upsert,
            authority_settings=authority_settings,
        )

    @provide
    def get_role_router(self) -> RoleRouter:
        """Provide landing route selection."""
        return RoleRouter()
