"""Unit tests for AccessTokenService."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from gatekeep.config import AccessTokenSettings
from gatekeep.domain.service import AccessTokenService
from gatekeep.domain.value import AccessTokenClaims, AccountId, TokenRejection
from gatekeep.util.error import SigningKeyMisconfiguredError
from tests.factories import TEST_SIGNING_KEY, make_auth_settings


def make_service(**access_token) -> AccessTokenService:
    settings = AccessTokenSettings(signing_key=TEST_SIGNING_KEY, **access_token)
    return AccessTokenService(make_auth_settings(access_token=settings))


class TestAccessTokenService:
    """Tests for AccessTokenService."""

    def test_issue_and_verify(self):
        """Test an issued token verifies to the same account."""
        # Arrange
        service = make_service()
        account_id = AccountId(uuid4())

        # Act
        token = service.issue(account_id, "alice", "alice@example.com")
        claims = service.verify(token)

        # Assert
        assert isinstance(claims, AccessTokenClaims)
        assert claims.account_id == str(account_id)
        assert claims.username == "alice"
        assert claims.email == "alice@example.com"
        assert claims.expires_at - claims.issued_at == timedelta(minutes=60)

    def test_lifetime_seconds(self):
        assert make_service(lifetime_minutes=15).lifetime_seconds == 900

    def test_expired_token_is_rejected(self):
        """Test a token past expiry plus clock skew is refused."""
        # Arrange
        service = make_service(lifetime_minutes=5, clock_skew_seconds=60)
        issued = datetime.now(timezone.utc) - timedelta(minutes=10)

        # Act
        result = service.verify(service.issue(AccountId(uuid4()), "a", "", now=issued))

        # Assert
        assert isinstance(result, TokenRejection)

    def test_token_signed_with_other_key_is_rejected(self):
        """Test tokens from another signer are refused."""
        # Arrange
        other = AccessTokenService(
            make_auth_settings(
                access_token=AccessTokenSettings(signing_key="z" * 40)
            )
        )
        token = other.issue(AccountId(uuid4()), "alice", "")

        # Act
        result = make_service().verify(token)

        # Assert
        assert isinstance(result, TokenRejection)

    def test_unsigned_token_is_rejected(self):
        """Test the "none" algorithm is refused."""
        token = jwt.encode(
            {"sub": str(uuid4()), "iat": 0, "exp": 4102444800},
            None,
            algorithm="none",
        )

        assert isinstance(make_service().verify(token), TokenRejection)

    def test_issuer_and_audience_enforced_when_configured(self):
        """Test tokens for another audience are refused."""
        # Arrange
        issuer = make_service(issuer="gatekeep", audience="web")
        verifier = make_service(issuer="gatekeep", audience="mobile")
        token = issuer.issue(AccountId(uuid4()), "alice", "")

        # Act & Assert
        assert isinstance(issuer.verify(token), AccessTokenClaims)
        assert isinstance(verifier.verify(token), TokenRejection)

    def test_non_uuid_subject(self):
        """Test a validly signed token whose subject is not an account ID."""
        # Arrange
        service = make_service()
        token = service.issue("not-a-uuid", "alice", "")

        # Act & Assert
        result = service.verify(token)
        assert isinstance(result, AccessTokenClaims)
        assert result.account_id == "not-a-uuid"

    @pytest.mark.parametrize("signing_key", ["", "   ", "too-short"])
    def test_misconfigured_signing_key(self, signing_key):
        """Test the service refuses to start without a usable key."""
        with pytest.raises(SigningKeyMisconfiguredError):
            AccessTokenService(
                make_auth_settings(
                    access_token=AccessTokenSettings(signing_key=signing_key)
                )
            )
