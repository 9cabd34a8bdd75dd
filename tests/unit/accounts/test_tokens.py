"""
Unit tests for TokenService.
"""

from datetime import timedelta

import jwt
import pytest

from core.domain.exceptions import InvalidTokenError
from core.infrastructure.tokens import REFRESH_TOKEN, TokenService

SECRET = "unit-test-secret-with-enough-length-for-hs256"


@pytest.fixture
def token_service():
    return TokenService(
        secret=SECRET,
        algorithm="HS256",
        access_lifetime=timedelta(minutes=5),
        refresh_lifetime=timedelta(days=1),
    )


class TestTokenService:
    """Tests for TokenService."""

    def test_access_token_round_trip(self, token_service):
        """Test the claims of a verified access token."""
        token = token_service.create_access_token("user-1", "jane@acme.test", "Manager")

        claims = token_service.verify(token)

        assert claims["sub"] == "user-1"
        assert claims["email"] == "jane@acme.test"
        assert claims["role"] == "Manager"
        assert claims["type"] == "access"

    def test_refresh_token_is_not_an_access_token(self, token_service):
        token = token_service.create_refresh_token("user-1")

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)
        assert token_service.verify(token, expected_type=REFRESH_TOKEN)["sub"] == "user-1"

    def test_expired_token(self):
        expired_service = TokenService(
            secret=SECRET, algorithm="HS256", access_lifetime=timedelta(seconds=-1)
        )
        token = expired_service.create_access_token("user-1", "jane@acme.test", "User")

        with pytest.raises(InvalidTokenError, match="expired"):
            expired_service.verify(token)

    def test_wrong_secret(self, token_service):
        token = jwt.encode({"sub": "x", "iat": 0, "exp": 2**31, "type": "access"}, "other-secret")

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_garbage(self, token_service):
        with pytest.raises(InvalidTokenError):
            token_service.verify("not-a-jwt")

    def test_access_lifetime_seconds(self, token_service):
        assert token_service.access_lifetime_seconds == 300
