"""Identity resolution domain service.

Maps a provider identity to a local account: an identity that is already
linked signs in to its account, a new identity whose email matches an
existing account is linked to it, and anything else creates an account.
"""

from datetime import datetime
from uuid import uuid4

import logfire

from gatekeep.config import AuthSettings
from gatekeep.domain.error import IdentityConflictError
from gatekeep.domain.model import Account, LinkedIdentity
from gatekeep.domain.model.common import utc_now
from gatekeep.domain.repository import AccountRepository
from gatekeep.domain.value import AccountId, AuthProvider, ProviderCredentials
from gatekeep.util.crypto import CredentialCipher

from .base import Service

DEFAULT_DISPLAY_NAME = "New User"

# Width of accounts.username and accounts.display_name
MAX_NAME_LENGTH = 255


def derive_username(
    provider: AuthProvider, provider_subject_id: str, email: str
) -> str:
    """Username for a new account: the email local part, else provider_subject."""
    if "@" in email:
        local_part = email.split("@", 1)[0]
        if local_part:
            return local_part[:MAX_NAME_LENGTH]
    return f"{provider.value}_{provider_subject_id}"[:MAX_NAME_LENGTH]


def derive_display_name(email: str) -> str:
    if "@" in email:
        local_part = email.split("@", 1)[0]
        if local_part:
            return local_part[:MAX_NAME_LENGTH]
    return DEFAULT_DISPLAY_NAME


class IdentityResolver(Service):
    """Finds, links or creates the account behind a provider identity."""

    def __init__(
        self,
        account_repository: AccountRepository,
        auth_settings: AuthSettings,
        credential_cipher: CredentialCipher,
    ) -> None:
        """Initialize identity resolver.

        Args:
            account_repository: Account repository
            auth_settings: Authentication settings
            credential_cipher: Cipher for provider credentials at rest
        """
        self.account_repository = account_repository
        self.link_by_email = auth_settings.link_accounts_by_email
        self.max_attempts = max(1, auth_settings.identity_conflict_retries)
        self.credential_cipher = credential_cipher

    async def resolve(
        self,
        provider: AuthProvider,
        provider_subject_id: str,
        provider_email: str = "",
        credentials: ProviderCredentials | None = None,
        email_verified: bool = True,
    ) -> Account:
        """Resolve a provider identity to an account.

        If two sign-ins for the same new identity race, the loser's write
        fails with IdentityConflictError and the lookup is run again, which
        then finds the winner's account.

        Args:
            provider: Identity provider
            provider_subject_id: Subject ID on that provider
            provider_email: Email asserted by the provider (may be empty)
            credentials: Provider API credentials to store, if any
            email_verified: Whether the provider vouches for the email. An
                unverified email is stored but never used to link accounts.

        Returns:
            The signed-in account

        Raises:
            IdentityConflictError: If the conflict persists after all retries
        """
        with logfire.span(
            "identity_resolver.resolve",
            provider=provider.value,
            provider_subject_id=provider_subject_id,
        ):
            for attempt in range(1, self.max_attempts + 1):
                try:
                    return await self._resolve_once(
                        provider,
                        provider_subject_id,
                        provider_email,
                        credentials,
                        email_verified,
                    )
                except IdentityConflictError:
                    if attempt == self.max_attempts:
                        logfire.error(
                            "Identity conflict persisted after retries",
                            provider=provider.value,
                            provider_subject_id=provider_subject_id,
                            attempts=attempt,
                        )
                        raise
                    logfire.warn(
                        "Identity conflict, retrying resolution",
                        provider=provider.value,
                        provider_subject_id=provider_subject_id,
                        attempt=attempt,
                    )
            raise AssertionError("unreachable")

    async def _resolve_once(
        self,
        provider: AuthProvider,
        provider_subject_id: str,
        provider_email: str,
        credentials: ProviderCredentials | None,
        email_verified: bool,
    ) -> Account:
        now = utc_now()

        account = await self.account_repository.find_by_linked_identity(
            provider, provider_subject_id
        )
        if account is not None:
            identities = tuple(
                self._refresh_identity(identity, provider_email, credentials, now)
                if identity.matches(provider, provider_subject_id)
                else identity
                for identity in account.linked_identities
            )
            account = await self.account_repository.replace(
                self._record_login(account, identities, now)
            )
            logfire.info(
                "Signed in with linked identity",
                account_id=str(account.id),
                provider=provider.value,
            )
            return account

        identity = self._new_identity(
            provider, provider_subject_id, provider_email, credentials, now
        )

        if provider_email and email_verified and self.link_by_email:
            account = await self.account_repository.find_by_email(provider_email)
            if account is not None:
                account = await self.account_repository.replace(
                    self._record_login(
                        account, account.linked_identities + (identity,), now
                    )
                )
                logfire.info(
                    "Linked identity to existing account by email",
                    account_id=str(account.id),
                    provider=provider.value,
                )
                return account

        account = Account(
            id=AccountId(uuid4()),
            username=derive_username(provider, provider_subject_id, provider_email),
            email=provider_email,
            email_verified=bool(provider_email) and email_verified,
            display_name=derive_display_name(provider_email),
            created_at=now,
            updated_at=now,
            last_login_at=now,
            login_count=1,
            linked_identities=(identity,),
        )
        account = await self.account_repository.insert(account)
        logfire.info(
            "Account created",
            account_id=str(account.id),
            provider=provider.value,
        )
        return account

    @staticmethod
    def _record_login(
        account: Account, identities: tuple[LinkedIdentity, ...], now: datetime
    ) -> Account:
        return account.model_copy(
            update={
                "linked_identities": identities,
                "login_count": account.login_count + 1,
                "last_login_at": now,
                "updated_at": now,
            }
        )

    def _new_identity(
        self,
        provider: AuthProvider,
        provider_subject_id: str,
        provider_email: str,
        credentials: ProviderCredentials | None,
        now: datetime,
    ) -> LinkedIdentity:
        identity = LinkedIdentity(
            provider=provider,
            provider_subject_id=provider_subject_id,
            provider_email=provider_email,
            linked_at=now,
            last_login_at=now,
        )
        return self._with_credentials(identity, credentials)

    def _refresh_identity(
        self,
        identity: LinkedIdentity,
        provider_email: str,
        credentials: ProviderCredentials | None,
        now: datetime,
    ) -> LinkedIdentity:
        update: dict = {"last_login_at": now}
        if provider_email:
            update["provider_email"] = provider_email
        return self._with_credentials(identity.model_copy(update=update), credentials)

    def _with_credentials(
        self, identity: LinkedIdentity, credentials: ProviderCredentials | None
    ) -> LinkedIdentity:
        if credentials is None or credentials.is_empty:
            return identity

        if not self.credential_cipher.enabled:
            logfire.warn(
                "Provider credentials supplied but no encryption key configured; "
                "not storing them",
                provider=identity.provider.value,
            )
            return identity

        update: dict = {"access_token_expires_at": credentials.expires_at}
        if credentials.access_token:
            update["access_token_encrypted"] = self.credential_cipher.encrypt(
                credentials.access_token
            )
        if credentials.refresh_token:
            update["refresh_token_encrypted"] = self.credential_cipher.encrypt(
                credentials.refresh_token
            )
        return identity.model_copy(update=update)
