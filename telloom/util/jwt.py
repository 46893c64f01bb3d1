"""Session token utilities.

Tokens are issued by the external authentication layer. The payload follows
its shape: ``sub`` is the profile id and ``app_metadata`` carries the cached
role claims.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from pydantic import BaseModel, Field

from telloom.config import AuthSettings


class TokenPayload(BaseModel):
    """Session token payload."""

    sub: str
    email: str | None = None
    app_metadata: dict[str, Any] = Field(default_factory=dict)
    exp: datetime


class JWTError(Exception):
    """JWT-related error."""

    pass


def create_token(
    profile_id: str,
    email: str | None,
    settings: AuthSettings,
    app_metadata: dict[str, Any] | None = None,
) -> str:
    """Create a session token.

    Only used by scripts and tests; production tokens come from the
    authentication layer.

    Args:
        profile_id: Profile ID (``sub``)
        email: Email the principal signed in with
        settings: Authentication settings
        app_metadata: Cached role claims

    Returns:
        Encoded JWT token
    """
    expiry = datetime.now(timezone.utc) + timedelta(days=settings.jwt_expiry_days)

    payload: dict[str, Any] = {
        "sub": profile_id,
        "email": email,
        "app_metadata": app_metadata or {},
        "exp": expiry,
    }
    if settings.jwt_audience:
        payload["aud"] = settings.jwt_audience

    token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)

    return token


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a session token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"verify_aud": settings.jwt_audience is not None},
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")
    except ValueError:
        raise JWTError("Malformed token payload")
