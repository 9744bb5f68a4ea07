"""
Unit tests for caller token utilities.
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from superadmin.config.settings import get_settings
from superadmin.security import (
    CallerIdentity,
    create_access_token,
    extract_bearer_token,
    resolve_caller_from_token,
)

pytestmark = pytest.mark.unit

settings = get_settings()


class TestCreateAccessToken:
    """Test token creation."""

    def test_token_carries_identity_claims(self):
        """Test that the token has subject, email and audience."""
        token = create_access_token(user_id="user-1", email="user@example.com")

        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm], audience=settings.jwt_audience
        )

        assert payload["sub"] == "user-1"
        assert payload["email"] == "user@example.com"
        assert payload["aud"] == "authenticated"
        assert payload["role"] == "authenticated"
        assert "exp" in payload
        assert "jti" in payload

    def test_custom_expiration(self):
        """Test that expires_delta controls the exp claim."""
        token = create_access_token(user_id="user-1", expires_delta=timedelta(minutes=5))

        payload = jwt.get_unverified_claims(token)
        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)

        assert expires_at - datetime.now(timezone.utc) <= timedelta(minutes=5)


class TestResolveCaller:
    """Test caller resolution from bearer tokens."""

    def test_valid_token_resolves_identity(self):
        token = create_access_token(user_id="user-1", email="user@example.com")

        assert resolve_caller_from_token(token) == CallerIdentity(user_id="user-1", email="user@example.com")

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token(self, token):
        assert resolve_caller_from_token(token) is None

    def test_garbage_token(self):
        assert resolve_caller_from_token("not-a-jwt") is None

    def test_expired_token(self):
        token = create_access_token(user_id="user-1", expires_delta=timedelta(seconds=-1))

        assert resolve_caller_from_token(token) is None

    def test_wrong_secret(self):
        token = jwt.encode(
            {"sub": "user-1", "aud": settings.jwt_audience},
            "some-other-secret",
            algorithm=settings.jwt_algorithm,
        )

        assert resolve_caller_from_token(token) is None

    def test_wrong_audience(self):
        token = jwt.encode(
            {"sub": "user-1", "aud": "anon"},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        assert resolve_caller_from_token(token) is None

    def test_token_without_subject(self):
        token = jwt.encode(
            {"aud": settings.jwt_audience, "email": "user@example.com"},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        assert resolve_caller_from_token(token) is None


class TestExtractBearerToken:
    """Test Authorization header parsing."""

    def test_bearer_header(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_scheme_is_case_insensitive(self):
        assert extract_bearer_token("bearer abc") == "abc"

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer   ", "Basic dXNlcjpwYXNz"])
    def test_unusable_header(self, header):
        assert extract_bearer_token(header) is None
