"""PostgreSQL implementation of Account repository."""

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeep.domain.error import AccountNotFoundError, IdentityConflictError
from gatekeep.domain.model import Account
from gatekeep.domain.repository import AccountRepository
from gatekeep.domain.value import AccountId, AuthProvider
from gatekeep.persistence.mappers import (
    account_to_dict,
    linked_identities_to_dicts,
    row_to_account,
)
from gatekeep.persistence.tables import accounts_table, linked_identities_table


class PostgresAccountRepository(AccountRepository):
    """PostgreSQL implementation of AccountRepository.

    Writes run inside a savepoint, so a uniqueness violation on
    linked_identities leaves the surrounding transaction usable and the
    caller can retry.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID.

        Args:
            account_id: Account ID to look up

        Returns:
            Account with its linked identities if found, None otherwise
        """
        stmt = select(accounts_table).where(accounts_table.c.id == account_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return await self._load(dict(row)) if row else None

    async def find_by_email(self, email: str) -> Optional[Account]:
        """Find the oldest account with this primary email."""
        stmt = (
            select(accounts_table)
            .where(accounts_table.c.email == email)
            .order_by(accounts_table.c.created_at, accounts_table.c.id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return await self._load(dict(row)) if row else None

    async def find_by_linked_identity(
        self, provider: AuthProvider, provider_subject_id: str
    ) -> Optional[Account]:
        """Find the account a provider identity is linked to."""
        stmt = (
            select(accounts_table)
            .select_from(
                accounts_table.join(
                    linked_identities_table,
                    accounts_table.c.id == linked_identities_table.c.account_id,
                )
            )
            .where(linked_identities_table.c.provider == provider.value)
            .where(
                linked_identities_table.c.provider_subject_id == provider_subject_id
            )
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return await self._load(dict(row)) if row else None

    async def insert(self, account: Account) -> Account:
        """Insert an account and its linked identities.

        Raises:
            IdentityConflictError: If a linked identity is already taken
        """
        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    accounts_table.insert().values(**account_to_dict(account))
                )
                await self._insert_identities(account)
        except IntegrityError as e:
            raise await self._conflict(account) from e
        return account

    async def replace(self, account: Account) -> Account:
        """Overwrite an account and its linked identities.

        Raises:
            AccountNotFoundError: If the account does not exist
            IdentityConflictError: If a linked identity belongs to another account
        """
        values = account_to_dict(account)
        del values["id"]
        try:
            async with self.session.begin_nested():
                result = await self.session.execute(
                    accounts_table.update()
                    .where(accounts_table.c.id == account.id)
                    .values(**values)
                )
                if result.rowcount == 0:
                    raise AccountNotFoundError(str(account.id))

                await self.session.execute(
                    delete(linked_identities_table).where(
                        linked_identities_table.c.account_id == account.id
                    )
                )
                await self._insert_identities(account)
        except IntegrityError as e:
            raise await self._conflict(account) from e
        return account

    async def _insert_identities(self, account: Account) -> None:
        rows = linked_identities_to_dicts(account)
        if rows:
            await self.session.execute(linked_identities_table.insert(), rows)

    async def _load(self, row: dict) -> Account:
        stmt = (
            select(linked_identities_table)
            .where(linked_identities_table.c.account_id == row["id"])
            .order_by(linked_identities_table.c.position)
        )
        result = await self.session.execute(stmt)
        identity_rows = [dict(r) for r in result.mappings().all()]
        return row_to_account(row, identity_rows)

    async def _conflict(self, account: Account) -> IdentityConflictError:
        """Build the error for the identity another account already holds."""
        for identity in account.linked_identities:
            stmt = select(linked_identities_table.c.account_id).where(
                linked_identities_table.c.provider == identity.provider.value,
                linked_identities_table.c.provider_subject_id
                == identity.provider_subject_id,
            )
            owner = (await self.session.execute(stmt)).scalar_one_or_none()
            if owner is not None and owner != account.id:
                return IdentityConflictError(
                    identity.provider.value, identity.provider_subject_id
                )

        first = account.linked_identities[0] if account.linked_identities else None
        return IdentityConflictError(
            first.provider.value if first else "",
            first.provider_subject_id if first else "",
        )
