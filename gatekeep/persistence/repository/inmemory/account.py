"""In-memory account repository for testing."""

from typing import Optional

from gatekeep.domain.error import AccountNotFoundError, IdentityConflictError
from gatekeep.domain.model import Account
from gatekeep.domain.repository import AccountRepository
from gatekeep.domain.value import AccountId, AuthProvider


class InMemoryAccountRepository(AccountRepository):
    """In-memory implementation of AccountRepository for testing.

    Keeps an index of (provider, subject) -> account ID and enforces the same
    uniqueness rule as the linked_identities primary key.
    """

    def __init__(self) -> None:
        self._accounts: dict[AccountId, Account] = {}
        self._identity_index: dict[tuple[str, str], AccountId] = {}

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID."""
        return self._accounts.get(account_id)

    async def find_by_email(self, email: str) -> Optional[Account]:
        """Find the oldest account with this primary email."""
        matches = [a for a in self._accounts.values() if a.email == email]
        if not matches:
            return None
        return min(matches, key=lambda a: a.created_at)

    async def find_by_linked_identity(
        self, provider: AuthProvider, provider_subject_id: str
    ) -> Optional[Account]:
        """Find the account a provider identity is linked to."""
        account_id = self._identity_index.get((provider.value, provider_subject_id))
        return self._accounts.get(account_id) if account_id else None

    async def insert(self, account: Account) -> Account:
        """Insert a new account."""
        self._check_identities(account)
        self._accounts[account.id] = account
        self._index(account)
        return account

    async def replace(self, account: Account) -> Account:
        """Overwrite an existing account."""
        if account.id not in self._accounts:
            raise AccountNotFoundError(str(account.id))
        self._check_identities(account)

        self._identity_index = {
            key: owner
            for key, owner in self._identity_index.items()
            if owner != account.id
        }
        self._accounts[account.id] = account
        self._index(account)
        return account

    def _check_identities(self, account: Account) -> None:
        seen: set[tuple[str, str]] = set()
        for identity in account.linked_identities:
            key = (identity.provider.value, identity.provider_subject_id)
            owner = self._identity_index.get(key)
            if key in seen or (owner is not None and owner != account.id):
                raise IdentityConflictError(*key)
            seen.add(key)

    def _index(self, account: Account) -> None:
        for identity in account.linked_identities:
            key = (identity.provider.value, identity.provider_subject_id)
            self._identity_index[key] = account.id
