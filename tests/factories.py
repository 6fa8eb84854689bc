"""Builders for settings and domain objects used across unit tests."""

from datetime import datetime, timezone
from uuid import uuid4

from cryptography.fernet import Fernet

from gatekeep.config import AccessTokenSettings, AuthSettings, GoogleSettings, MicrosoftSettings
from gatekeep.domain.model import Account, LinkedIdentity
from gatekeep.domain.value import AccountId, AuthProvider
from gatekeep.util.crypto import CredentialCipher
from tests.tokens import GOOGLE_CLIENT_ID, MICROSOFT_CLIENT_ID

TEST_SIGNING_KEY = "test-signing-key-for-gatekeep-tests-0123456789"
TEST_CREDENTIALS_KEY = Fernet.generate_key().decode("ascii")


def make_auth_settings(**overrides) -> AuthSettings:
    """AuthSettings with a valid signing key and both client IDs configured."""
    values = {
        "access_token": AccessTokenSettings(signing_key=TEST_SIGNING_KEY),
        "google": GoogleSettings(client_id=GOOGLE_CLIENT_ID),
        "microsoft": MicrosoftSettings(client_id=MICROSOFT_CLIENT_ID),
    }
    values.update(overrides)
    return AuthSettings(**values)


def make_cipher() -> CredentialCipher:
    return CredentialCipher(TEST_CREDENTIALS_KEY)


def read_credential(ciphertext: str, key: str = TEST_CREDENTIALS_KEY) -> str:
    """Decrypt a stored provider credential."""
    plaintext = Fernet(key.encode("ascii")).decrypt(ciphertext.encode("ascii"))
    return plaintext.decode("utf-8")


def make_account(
    email: str = "alice@example.com",
    identities: tuple[tuple[AuthProvider, str], ...] = ((AuthProvider.GOOGLE, "g-1"),),
    created_at: datetime | None = None,
    **overrides,
) -> Account:
    """Account with one linked identity per (provider, subject) pair."""
    now = created_at or datetime.now(timezone.utc)
    values = {
        "id": AccountId(uuid4()),
        "username": email.split("@")[0] or "user",
        "email": email,
        "email_verified": bool(email),
        "display_name": email.split("@")[0] or "New User",
        "created_at": now,
        "updated_at": now,
        "last_login_at": now,
        "login_count": 1,
        "linked_identities": tuple(
            LinkedIdentity(
                provider=provider,
                provider_subject_id=subject,
                provider_email=email,
                linked_at=now,
                last_login_at=now,
            )
            for provider, subject in identities
        ),
    }
    values.update(overrides)
    return Account(**values)
