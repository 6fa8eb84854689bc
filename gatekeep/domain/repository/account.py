"""Account repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from gatekeep.domain.model.account import Account
from gatekeep.domain.value import AccountId, AuthProvider


class AccountRepository(ABC):
    """Repository for the Account aggregate.

    Linked identities are stored with their account; implementations must
    reject a write that would attach an already-linked (provider, subject)
    pair to a second account by raising IdentityConflictError.
    """

    @abstractmethod
    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID.

        Args:
            account_id: The account's unique identifier

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Account]:
        """Find an account by its primary email.

        Emails are not unique; when several accounts share one, the oldest
        account is returned. Matching is exact.

        Args:
            email: Primary email address

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_linked_identity(
        self, provider: AuthProvider, provider_subject_id: str
    ) -> Optional[Account]:
        """Find the account a provider identity is linked to.

        Args:
            provider: The identity provider
            provider_subject_id: Subject ID on that provider

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert(self, account: Account) -> Account:
        """Store a new account with its linked identities.

        Raises:
            IdentityConflictError: If a linked identity is already taken
        """
        pass

    @abstractmethod
    async def replace(self, account: Account) -> Account:
        """Overwrite an existing account, including its linked identities.

        Raises:
            IdentityConflictError: If a newly linked identity is already taken
            AccountNotFoundError: If the account does not exist
        """
        pass
