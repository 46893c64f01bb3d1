"""Request authentication helpers shared by the routes."""

from fastapi import HTTPException, status

from telloom.domain.model import Principal
from telloom.domain.service import JWTService
from telloom.domain.value import Role
from telloom.util.jwt import JWTError


def authenticate(
    jwt_service: JWTService,
    auth_token: str | None,
    authorization: str | None,
    active_role: Role | None = None,
) -> Principal:
    """Build the principal for a request.

    The session token is read from the ``auth_token`` cookie, or from an
    ``Authorization: Bearer`` header when no cookie is present.

    Args:
        jwt_service: JWT service from DI
        auth_token: JWT token from cookie
        authorization: Authorization header
        active_role: Role the caller asked to act in (X-Active-Role header)

    Returns:
        Authenticated principal

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    token = auth_token
    if not token and authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials:
            token = credentials.strip()

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        return jwt_service.principal_from_token(token, active_role)
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )
