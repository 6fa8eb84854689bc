"""Account domain service."""

import logfire

from gatekeep.domain.error import AccountNotFoundError, NotFoundError
from gatekeep.domain.model import Account
from gatekeep.domain.model.common import utc_now
from gatekeep.domain.repository import AccountRepository
from gatekeep.domain.value import AccountId, AuthProvider

from .base import Service


class AccountService(Service):
    """Domain service for account operations."""

    def __init__(self, account_repository: AccountRepository) -> None:
        """Initialize account service.

        Args:
            account_repository: Account repository
        """
        self.account_repository = account_repository

    async def get_by_id(self, account_id: AccountId) -> Account:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity

        Raises:
            AccountNotFoundError: If account not found
        """
        with logfire.span("account_service.get_by_id", account_id=str(account_id)):
            account = await self.account_repository.find_by_id(account_id)
            if not account:
                logfire.warn("Account not found", account_id=str(account_id))
                raise AccountNotFoundError(str(account_id))
            return account

    async def unlink_identity(
        self, account_id: AccountId, provider: AuthProvider
    ) -> Account:
        """Remove every identity of a provider from an account.

        Unlinking the last identity is allowed; the account then can only
        be reached again through email linking.

        Args:
            account_id: Account ID
            provider: Provider whose identities are removed

        Returns:
            Updated account

        Raises:
            AccountNotFoundError: If account not found
            NotFoundError: If no identity of that provider is linked
        """
        with logfire.span(
            "account_service.unlink_identity",
            account_id=str(account_id),
            provider=provider.value,
        ):
            account = await self.get_by_id(account_id)
            if not account.identities_for(provider):
                raise NotFoundError("Linked identity", provider.value)

            remaining = tuple(
                i for i in account.linked_identities if i.provider != provider
            )
            updated = await self.account_repository.replace(
                account.model_copy(
                    update={"linked_identities": remaining, "updated_at": utc_now()}
                )
            )
            logfire.info(
                "Identity unlinked",
                account_id=str(account_id),
                provider=provider.value,
                remaining=len(remaining),
            )
            return updated
