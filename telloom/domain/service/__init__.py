"""Domain services."""

from .access_gate import AccessGate
from .authority_resolver import (
    AuthorityProvider,
    AuthorityResolver,
    BypassDelegationAuthority,
    BypassOwnershipAuthority,
    ClaimsHintAuthority,
    DelegationAuthority,
    OwnershipAuthority,
    default_authority_chain,
)
from .base import Service, within_budget
from .idempotent_upsert import IdempotentUpsert
from .invitation_provisioner import InvitationProvisioner
from .invitation_service import InvitationService
from .jwt_service import JWTService
from .role_router import RoleRouter
from .role_service import RoleService

__all__ = [
    "AccessGate",
    "AuthorityProvider",
    "AuthorityResolver",
    "BypassDelegationAuthority",
    "BypassOwnershipAuthority",
    "ClaimsHintAuthority",
    "DelegationAuthority",
    "IdempotentUpsert",
    "InvitationProvisioner",
    "InvitationService",
    "JWTService",
    "OwnershipAuthority",
    "RoleRouter",
    "RoleService",
    "Service",
    "default_authority_chain",
    "within_budget",
]
