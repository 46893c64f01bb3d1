"""Unit tests for JWTService."""

from uuid import uuid4

import pytest

from telloom.config import AuthSettings
from telloom.domain.service import JWTService
from telloom.domain.value import Role
from telloom.util.jwt import JWTError


@pytest.fixture
def jwt_service() -> JWTService:
    return JWTService(AuthSettings(jwt_secret="unit-test-secret"))


class TestPrincipalFromToken:
    """Tests for principal_from_token."""

    def test_builds_principal_with_claims_hint(self, jwt_service):
        """The token subject becomes the profile id and app_metadata the hint."""
        # Arrange
        profile_id = str(uuid4())
        token = jwt_service.create_token(
            profile_id,
            "user@example.com",
            app_metadata={"roles": ["sharer", "LISTENER"], "executor_count": 2},
        )

        # Act
        principal = jwt_service.principal_from_token(token, Role.LISTENER)

        # Assert
        assert str(principal.id) == profile_id
        assert principal.email == "user@example.com"
        assert principal.active_role == Role.LISTENER
        assert principal.claims is not None
        assert principal.claims.roles == frozenset({Role.SHARER, Role.LISTENER})
        assert principal.claims.executor_count == 2

    def test_non_uuid_subject_rejected(self, jwt_service):
        """A subject that is not a profile id is an invalid token."""
        token = jwt_service.create_token("not-a-uuid", "user@example.com")

        with pytest.raises(JWTError, match="subject"):
            jwt_service.principal_from_token(token)

    def test_wrong_secret_rejected(self, jwt_service):
        """Tokens signed with another secret are refused."""
        other = JWTService(AuthSettings(jwt_secret="someone-else"))
        token = other.create_token(str(uuid4()), "user@example.com")

        with pytest.raises(JWTError):
            jwt_service.principal_from_token(token)

    def test_wrong_audience_rejected(self, jwt_service):
        """Tokens minted for another audience are refused."""
        other = JWTService(
            AuthSettings(jwt_secret="unit-test-secret", jwt_audience="service")
        )
        token = other.create_token(str(uuid4()), "user@example.com")

        with pytest.raises(JWTError):
            jwt_service.principal_from_token(token)

    def test_expired_token_rejected(self, jwt_service):
        """Expired tokens are refused."""
        expired = JWTService(
            AuthSettings(jwt_secret="unit-test-secret", jwt_expiry_days=-1)
        )
        token = expired.create_token(str(uuid4()), "user@example.com")

        with pytest.raises(JWTError, match="expired"):
            jwt_service.principal_from_token(token)


class TestGetPrincipalFromToken:
    """Tests for get_principal_from_token."""

    def test_missing_token(self, jwt_service):
        assert jwt_service.get_principal_from_token(None) is None

    def test_garbage_token(self, jwt_service):
        assert jwt_service.get_principal_from_token("not.a.jwt") is None

    def test_valid_token(self, jwt_service):
        profile_id = str(uuid4())
        token = jwt_service.create_token(profile_id, None)

        principal = jwt_service.get_principal_from_token(token)

        assert principal is not None
        assert str(principal.id) == profile_id
        assert principal.claims is not None
        assert principal.claims.roles == frozenset()
