"""JWT token domain service."""

from typing import Any, Optional
from uuid import UUID

import logfire

from telloom.config import AuthSettings
from telloom.domain.model import ClaimsSnapshot, Principal
from telloom.domain.value import ProfileId, Role
from telloom.util.jwt import JWTError, TokenPayload, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Domain service for session token operations."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def create_token(
        self,
        profile_id: str,
        email: str | None,
        app_metadata: dict[str, Any] | None = None,
    ) -> str:
        """Create a session token for a profile.

        Args:
            profile_id: Profile ID
            email: Sign-in email
            app_metadata: Cached role claims

        Returns:
            JWT token string
        """
        with logfire.span("jwt_service.create_token", profile_id=profile_id):
            token = create_token(profile_id, email, self.auth_settings, app_metadata)
            logfire.info("JWT token created", profile_id=profile_id)
            return token

    def verify_token(self, token: str) -> TokenPayload:
        """Verify JWT token and extract payload.

        Args:
            token: JWT token string

        Returns:
            Token payload

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.auth_settings)
                logfire.info("JWT token verified", profile_id=payload.sub)
                return payload
            except JWTError as e:
                logfire.warn("JWT token verification failed", error=str(e))
                raise

    def principal_from_token(
        self, token: str, active_role: Optional[Role] = None
    ) -> Principal:
        """Build the authenticated principal carried by a token.

        The token's app_metadata becomes an advisory claims hint only.

        Args:
            token: JWT token string
            active_role: Role the caller asked to act in, if any

        Returns:
            Principal

        Raises:
            JWTError: If token is invalid, expired or has a malformed subject
        """
        payload = self.verify_token(token)
        try:
            profile_id = ProfileId(UUID(payload.sub))
        except ValueError:
            raise JWTError("Token subject is not a profile id")

        return Principal(
            id=profile_id,
            email=payload.email,
            claims=ClaimsSnapshot.from_app_metadata(payload.app_metadata),
            active_role=active_role,
        )

    def get_principal_from_token(
        self, token: str | None, active_role: Optional[Role] = None
    ) -> Principal | None:
        """Build the principal without raising exceptions.

        Args:
            token: JWT token string (optional)
            active_role: Role the caller asked to act in, if any

        Returns:
            Principal if token is valid, None if token is missing or invalid
        """
        if not token:
            return None

        try:
            return self.principal_from_token(token, active_role)
        except JWTError as e:
            # Invalid or expired token, treat as unauthenticated
            logfire.debug(
                "JWT verification failed, treating as unauthenticated", error=str(e)
            )
            return None
