"""Unit tests for InMemoryAccountRepository."""

from uuid import uuid4

import pytest

from gatekeep.domain.error import AccountNotFoundError, IdentityConflictError
from gatekeep.domain.value import AuthProvider
from gatekeep.persistence.repository.inmemory import InMemoryAccountRepository
from tests.factories import make_account


class TestInMemoryAccountRepository:
    """Tests for InMemoryAccountRepository."""

    @pytest.mark.asyncio
    async def test_insert_and_find(self):
        """Test an inserted account is found by ID, email and identity."""
        # Arrange
        repository = InMemoryAccountRepository()
        account = make_account()

        # Act
        await repository.insert(account)

        # Assert
        assert await repository.find_by_id(account.id) == account
        assert await repository.find_by_email("alice@example.com") == account
        assert (
            await repository.find_by_linked_identity(AuthProvider.GOOGLE, "g-1")
            == account
        )
        assert await repository.find_by_email("bob@example.com") is None

    @pytest.mark.asyncio
    async def test_identity_is_unique_across_accounts(self):
        """Test a second account can not claim a linked identity."""
        # Arrange
        repository = InMemoryAccountRepository()
        await repository.insert(make_account())

        # Act & Assert
        with pytest.raises(IdentityConflictError):
            await repository.insert(make_account(email="bob@example.com"))

    @pytest.mark.asyncio
    async def test_replace_missing_account(self):
        """Test replacing an account that was never inserted."""
        repository = InMemoryAccountRepository()

        with pytest.raises(AccountNotFoundError):
            await repository.replace(make_account())

    @pytest.mark.asyncio
    async def test_replace_keeps_identity_order(self):
        """Test identities come back in the order they were linked."""
        # Arrange
        repository = InMemoryAccountRepository()
        account = await repository.insert(
            make_account(
                identities=(
                    (AuthProvider.MICROSOFT, "m-1"),
                    (AuthProvider.GOOGLE, "g-1"),
                    (AuthProvider.FACEBOOK, "f-1"),
                )
            )
        )

        # Act
        await repository.replace(account.model_copy(update={"login_count": 5}))

        # Assert
        found = await repository.find_by_id(account.id)
        assert found.login_count == 5
        assert [i.provider_subject_id for i in found.linked_identities] == [
            "m-1",
            "g-1",
            "f-1",
        ]

    @pytest.mark.asyncio
    async def test_missing_account_lookup(self):
        repository = InMemoryAccountRepository()

        assert await repository.find_by_id(uuid4()) is None
        assert (
            await repository.find_by_linked_identity(AuthProvider.GOOGLE, "nobody")
            is None
        )
