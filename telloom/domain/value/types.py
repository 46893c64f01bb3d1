"""Domain value objects for Telloom access control.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from enum import Enum

from pydantic import field_validator

from telloom.domain.value.common import RootValueObject


class Role(str, Enum):
    """Roles a profile can hold. A profile may hold several at once."""

    SHARER = "SHARER"
    EXECUTOR = "EXECUTOR"
    LISTENER = "LISTENER"
    ADMIN = "ADMIN"


class InvitationStatus(str, Enum):
    """Status of an invitation.

    PENDING is the only non-terminal state.
    """

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    REVOKED = "REVOKED"
    EXPIRED = "EXPIRED"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition is allowed from this status."""
        return self is not InvitationStatus.PENDING


class AcceptanceRejection(str, Enum):
    """Typed reasons an invitation acceptance is denied."""

    EMAIL_MISMATCH = "EMAIL_MISMATCH"
    INVITATION_ACCEPTED = "INVITATION_ACCEPTED"
    INVITATION_DECLINED = "INVITATION_DECLINED"
    INVITATION_REVOKED = "INVITATION_REVOKED"
    INVITATION_EXPIRED = "INVITATION_EXPIRED"
    INVITATION_NOT_FOUND = "INVITATION_NOT_FOUND"
    PARTITION_NOT_FOUND = "PARTITION_NOT_FOUND"

    @classmethod
    def for_status(cls, status: InvitationStatus) -> "AcceptanceRejection":
        """Map a terminal invitation status to its rejection reason."""
        return cls(f"INVITATION_{status.value}")


class Route(str, Enum):
    """Landing routes, one per role plus onboarding."""

    ADMIN = "/admin"
    SHARER = "/role-sharer"
    EXECUTOR = "/role-executor"
    LISTENER = "/role-listener"
    ONBOARDING = "/dashboard/onboarding"


class InvitationToken(RootValueObject[str]):
    """URL-safe invitation token."""

    @field_validator("root")
    @classmethod
    def validate_token_format(cls, v: str) -> str:
        """Validate token is URL-safe and within length limits."""
        if len(v) < 1 or len(v) > 255:
            raise ValueError("Token must be 1-255 characters")
        if not re.match(r"^[A-Za-z0-9_-]+$", v):
            raise ValueError("Token must be URL-safe")
        return v


class Email(RootValueObject[str]):
    """Email address, normalized for case-insensitive comparison.

    Stored trimmed and lowercased. Invitation matching depends on this.
    """

    @field_validator("root")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Trim, lowercase and sanity-check the address."""
        v = v.strip().lower()
        if not re.match(r"^[^@\s]+@[^@\s]+$", v):
            raise ValueError("Email must look like local@domain")
        if len(v) > 255:
            raise ValueError("Email must be at most 255 characters")
        return v
