"""Access use cases."""

from telloom.application.usecase.access.check_access import (
    CheckAccessRequest,
    CheckAccessResponse,
    CheckAccessUseCase,
)
from telloom.application.usecase.access.resolve_context import (
    ResolveContextRequest,
    ResolveContextResponse,
    ResolveContextUseCase,
)

__all__ = [
    "CheckAccessRequest",
    "CheckAccessResponse",
    "CheckAccessUseCase",
    "ResolveContextRequest",
    "ResolveContextResponse",
    "ResolveContextUseCase",
]
