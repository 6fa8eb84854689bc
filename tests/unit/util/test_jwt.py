"""Unit tests for access token JWT helpers."""

from datetime import datetime, timezone

import jwt
import pytest

from gatekeep.config import AccessTokenSettings
from gatekeep.util.error import SigningKeyMisconfiguredError
from gatekeep.util.jwt import JWTError, create_token, ensure_signing_key, verify_token
from tests.factories import TEST_SIGNING_KEY


class TestAccessTokenJwt:
    """Tests for create_token and verify_token."""

    def test_claims(self):
        """Test the token carries subject, name, email and timing claims."""
        # Arrange
        settings = AccessTokenSettings(signing_key=TEST_SIGNING_KEY, lifetime_minutes=30)
        now = datetime(2030, 1, 1, tzinfo=timezone.utc)

        # Act
        token = create_token("acct-1", "alice", "alice@example.com", settings, now=now)

        # Assert
        claims = jwt.decode(
            token,
            TEST_SIGNING_KEY,
            algorithms=["HS256"],
            options={"verify_exp": False, "verify_iat": False, "verify_nbf": False},
        )
        assert claims["sub"] == "acct-1"
        assert claims["unique_name"] == "alice"
        assert claims["email"] == "alice@example.com"
        assert claims["exp"] - claims["iat"] == 1800
        assert claims["nbf"] == claims["iat"]
        assert "iss" not in claims and "aud" not in claims

    def test_verify_round_trip(self):
        settings = AccessTokenSettings(signing_key=TEST_SIGNING_KEY)

        payload = verify_token(create_token("acct-1", "alice", "", settings), settings)

        assert payload.sub == "acct-1"

    def test_wrong_key(self):
        """Test a token signed with another key fails verification."""
        issuer = AccessTokenSettings(signing_key="o" * 40)
        token = create_token("acct-1", "alice", "", issuer)

        with pytest.raises(JWTError):
            verify_token(token, AccessTokenSettings(signing_key=TEST_SIGNING_KEY))

    def test_minimum_key_length(self):
        ensure_signing_key(AccessTokenSettings(signing_key="k" * 32))
        with pytest.raises(SigningKeyMisconfiguredError):
            ensure_signing_key(AccessTokenSettings(signing_key="k" * 31))
