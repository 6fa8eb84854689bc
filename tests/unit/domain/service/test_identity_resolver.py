"""Unit tests for IdentityResolver."""

from datetime import datetime, timedelta, timezone

import pytest

from gatekeep.domain.error import IdentityConflictError
from gatekeep.domain.model import Account
from gatekeep.domain.service import IdentityResolver
from gatekeep.domain.service.identity_resolver import (
    derive_display_name,
    derive_username,
)
from gatekeep.domain.value import AuthProvider, ProviderCredentials
from gatekeep.persistence.repository.inmemory import InMemoryAccountRepository
from gatekeep.util.crypto import CredentialCipher
from tests.factories import (
    make_account,
    make_auth_settings,
    make_cipher,
    read_credential,
)


def make_resolver(
    repository: InMemoryAccountRepository,
    cipher: CredentialCipher | None = None,
    **settings,
) -> IdentityResolver:
    return IdentityResolver(
        account_repository=repository,
        auth_settings=make_auth_settings(**settings),
        credential_cipher=cipher or make_cipher(),
    )


class ConflictingAccountRepository(InMemoryAccountRepository):
    """Simulates a concurrent sign-in claiming the identity first.

    The first ``conflicts`` inserts store the racing account and then fail,
    as the database would when the other transaction committed first.
    """

    def __init__(self, racing_account: Account, conflicts: int = 1) -> None:
        super().__init__()
        self.racing_account = racing_account
        self.conflicts = conflicts
        self.insert_attempts = 0

    async def insert(self, account: Account) -> Account:
        self.insert_attempts += 1
        if self.insert_attempts <= self.conflicts:
            if self.racing_account.id not in self._accounts:
                await super().insert(self.racing_account)
            identity = account.linked_identities[0]
            raise IdentityConflictError(
                identity.provider.value, identity.provider_subject_id
            )
        return await super().insert(account)


class TestIdentityResolver:
    """Tests for IdentityResolver."""

    @pytest.mark.asyncio
    async def test_new_identity_creates_account(self):
        """Test an unseen identity creates an account with one login."""
        # Arrange
        repository = InMemoryAccountRepository()
        resolver = make_resolver(repository)

        # Act
        account = await resolver.resolve(
            AuthProvider.GOOGLE, "g123", "alice@example.com"
        )

        # Assert
        assert account.login_count == 1
        assert account.email == "alice@example.com"
        assert account.email_verified is True
        assert account.username == "alice"
        assert account.display_name == "alice"
        assert account.last_login_at is not None
        assert [(i.provider, i.provider_subject_id) for i in account.linked_identities] == [
            (AuthProvider.GOOGLE, "g123")
        ]
        assert await repository.find_by_id(account.id) == account

    @pytest.mark.asyncio
    async def test_new_identity_without_email(self):
        """Test an identity without email gets a provider-based username."""
        # Arrange
        resolver = make_resolver(InMemoryAccountRepository())

        # Act
        account = await resolver.resolve(AuthProvider.FACEBOOK, "fb-9")

        # Assert
        assert account.email == ""
        assert account.email_verified is False
        assert account.username == "facebook_fb-9"
        assert account.display_name == "New User"

    @pytest.mark.asyncio
    async def test_linked_identity_signs_in_to_same_account(self):
        """Test a returning identity finds its account and counts the login."""
        # Arrange
        repository = InMemoryAccountRepository()
        resolver = make_resolver(repository)
        first = await resolver.resolve(AuthProvider.GOOGLE, "g123", "alice@example.com")

        # Act
        second = await resolver.resolve(AuthProvider.GOOGLE, "g123", "alice@example.com")

        # Assert
        assert second.id == first.id
        assert second.login_count == 2
        assert len(second.linked_identities) == 1

    @pytest.mark.asyncio
    async def test_returning_identity_updates_provider_email(self):
        """Test the identity's advisory email follows the provider."""
        # Arrange
        repository = InMemoryAccountRepository()
        resolver = make_resolver(repository)
        await resolver.resolve(AuthProvider.GOOGLE, "g123", "old@example.com")

        # Act
        account = await resolver.resolve(AuthProvider.GOOGLE, "g123", "new@example.com")

        # Assert
        assert account.linked_identities[0].provider_email == "new@example.com"
        # The primary email is not changed by the provider
        assert account.email == "old@example.com"

    @pytest.mark.asyncio
    async def test_email_match_links_identity(self):
        """Test a new identity with a known email joins the existing account."""
        # Arrange
        repository = InMemoryAccountRepository()
        resolver = make_resolver(repository)
        google = await resolver.resolve(AuthProvider.GOOGLE, "g123", "alice@example.com")

        # Act
        microsoft = await resolver.resolve(
            AuthProvider.MICROSOFT, "m456", "alice@example.com"
        )

        # Assert
        assert microsoft.id == google.id
        assert microsoft.login_count == 2
        assert [(i.provider, i.provider_subject_id) for i in microsoft.linked_identities] == [
            (AuthProvider.GOOGLE, "g123"),
            (AuthProvider.MICROSOFT, "m456"),
        ]

    @pytest.mark.asyncio
    async def test_email_linking_disabled_creates_separate_account(self):
        """Test email matches are ignored when linking is turned off."""
        # Arrange
        repository = InMemoryAccountRepository()
        resolver = make_resolver(repository, link_accounts_by_email=False)
        google = await resolver.resolve(AuthProvider.GOOGLE, "g123", "alice@example.com")

        # Act
        microsoft = await resolver.resolve(
            AuthProvider.MICROSOFT, "m456", "alice@example.com"
        )

        # Assert
        assert microsoft.id != google.id
        assert microsoft.login_count == 1

    @pytest.mark.asyncio
    async def test_unverified_email_does_not_link(self):
        """Test an unverified email is stored but never joins another account."""
        # Arrange
        repository = InMemoryAccountRepository()
        resolver = make_resolver(repository)
        google = await resolver.resolve(AuthProvider.GOOGLE, "g123", "alice@example.com")

        # Act
        microsoft = await resolver.resolve(
            AuthProvider.MICROSOFT, "m456", "alice@example.com", email_verified=False
        )

        # Assert
        assert microsoft.id != google.id
        assert microsoft.email == "alice@example.com"
        assert microsoft.email_verified is False
        assert microsoft.linked_identities[0].provider_email == "alice@example.com"

    @pytest.mark.asyncio
    async def test_email_match_is_exact(self):
        """Test emails differing in case are not linked."""
        # Arrange
        repository = InMemoryAccountRepository()
        resolver = make_resolver(repository)
        google = await resolver.resolve(AuthProvider.GOOGLE, "g123", "alice@example.com")

        # Act
        microsoft = await resolver.resolve(
            AuthProvider.MICROSOFT, "m456", "Alice@Example.com"
        )

        # Assert
        assert microsoft.id != google.id

    @pytest.mark.asyncio
    async def test_email_match_prefers_oldest_account(self):
        """Test the oldest account wins when several share an email."""
        # Arrange
        repository = InMemoryAccountRepository()
        now = datetime.now(timezone.utc)
        older = make_account(
            identities=((AuthProvider.FACEBOOK, "fb-1"),),
            created_at=now - timedelta(days=10),
        )
        newer = make_account(
            identities=((AuthProvider.FACEBOOK, "fb-2"),), created_at=now
        )
        await repository.insert(newer)
        await repository.insert(older)
        resolver = make_resolver(repository)

        # Act
        account = await resolver.resolve(AuthProvider.GOOGLE, "g123", "alice@example.com")

        # Assert
        assert account.id == older.id

    @pytest.mark.asyncio
    async def test_conflict_is_retried(self):
        """Test a lost race resolves to the account created by the winner."""
        # Arrange
        racing = make_account(
            email="", identities=((AuthProvider.GOOGLE, "g123"),), login_count=1
        )
        repository = ConflictingAccountRepository(racing, conflicts=1)
        resolver = make_resolver(repository)

        # Act
        account = await resolver.resolve(AuthProvider.GOOGLE, "g123")

        # Assert
        assert account.id == racing.id
        assert account.login_count == 2
        assert repository.insert_attempts == 1

    @pytest.mark.asyncio
    async def test_persistent_conflict_is_raised(self):
        """Test the conflict surfaces once the retries are used up."""
        # Arrange
        repository = InMemoryAccountRepository()

        async def always_conflict(account):
            raise IdentityConflictError("google", "g123")

        repository.insert = always_conflict
        resolver = make_resolver(repository, identity_conflict_retries=2)

        # Act & Assert
        with pytest.raises(IdentityConflictError):
            await resolver.resolve(AuthProvider.GOOGLE, "g123")

    @pytest.mark.asyncio
    async def test_credentials_are_encrypted(self):
        """Test provider credentials are stored as ciphertext."""
        # Arrange
        resolver = make_resolver(InMemoryAccountRepository())
        credentials = ProviderCredentials(
            access_token="provider-access", refresh_token="provider-refresh"
        )

        # Act
        account = await resolver.resolve(
            AuthProvider.GOOGLE, "g123", "alice@example.com", credentials
        )

        # Assert
        identity = account.linked_identities[0]
        assert identity.access_token_encrypted not in (None, "provider-access")
        assert read_credential(identity.access_token_encrypted) == "provider-access"
        assert read_credential(identity.refresh_token_encrypted) == "provider-refresh"

    @pytest.mark.asyncio
    async def test_credentials_dropped_without_key(self):
        """Test credentials are not stored when encryption is not configured."""
        # Arrange
        resolver = make_resolver(
            InMemoryAccountRepository(), cipher=CredentialCipher(None)
        )

        # Act
        account = await resolver.resolve(
            AuthProvider.GOOGLE,
            "g123",
            credentials=ProviderCredentials(access_token="provider-access"),
        )

        # Assert
        identity = account.linked_identities[0]
        assert identity.access_token_encrypted is None
        assert identity.refresh_token_encrypted is None


class TestDerivedNames:
    """Tests for username and display name derivation."""

    def test_username_from_email(self):
        assert derive_username(AuthProvider.GOOGLE, "g1", "bob@example.com") == "bob"

    def test_username_without_email(self):
        assert derive_username(AuthProvider.MICROSOFT, "m1", "") == "microsoft_m1"

    def test_username_with_empty_local_part(self):
        assert derive_username(AuthProvider.GOOGLE, "g1", "@example.com") == "google_g1"

    def test_display_name_default(self):
        assert derive_display_name("") == "New User"

    def test_names_fit_their_columns(self):
        long_subject = "m" * 255
        long_email = "b" * 300 + "@example.com"

        assert len(derive_username(AuthProvider.MICROSOFT, long_subject, "")) == 255
        assert len(derive_username(AuthProvider.GOOGLE, "g1", long_email)) == 255
        assert len(derive_display_name(long_email)) == 255
