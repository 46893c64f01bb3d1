"""Domain error to HTTP response mapping."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from telloom.domain.error import (
    AuthorityUnavailableError,
    BusinessRuleViolationError,
    DomainError,
    NotAuthorizedError,
    NotFoundError,
    ProvisioningError,
    ValidationError,
)

# Most specific first; the first matching class wins
STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (NotAuthorizedError, status.HTTP_403_FORBIDDEN),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (BusinessRuleViolationError, status.HTTP_409_CONFLICT),
    (ProvisioningError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (AuthorityUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for(error: DomainError) -> int:
    """HTTP status code for a domain error."""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a domain error as a JSON error response."""
    status_code = status_for(exc) if isinstance(exc, DomainError) else 500
    if status_code >= 500:
        logfire.error(
            "Request failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
    else:
        logfire.info(
            "Request rejected",
            path=request.url.path,
            error_type=type(exc).__name__,
            status_code=status_code,
        )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain error handler on an application."""
    app.add_exception_handler(DomainError, domain_error_handler)
