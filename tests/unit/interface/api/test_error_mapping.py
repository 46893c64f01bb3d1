"""Tests for domain error to HTTP status mapping."""

import pytest

from telloom.domain.error import (
    AuthorityUnavailableError,
    BusinessRuleViolationError,
    DomainError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
    ProvisioningError,
    ValidationError,
)
from telloom.interface.api.errors import status_for


class TestStatusFor:
    """Tests for status_for."""

    @pytest.mark.parametrize(
        "error,expected",
        [
            (NotFoundError("Invitation", "abc"), 404),
            (NotAuthorizedError("revoke", "invitation abc", "p1"), 403),
            (ValidationError("Invalid email"), 400),
            (BusinessRuleViolationError("duplicate"), 409),
            (InvalidTransitionError("already accepted"), 409),
            (ProvisioningError("executor_link", ["procedure: down", "direct: down"]), 503),
            (AuthorityUnavailableError("list_roles"), 503),
            (DomainError("unclassified"), 500),
        ],
    )
    def test_status_codes(self, error, expected):
        assert status_for(error) == expected
