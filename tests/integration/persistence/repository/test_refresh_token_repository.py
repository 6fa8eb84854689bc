"""Integration tests for PostgresRefreshTokenRepository."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from dishka import AsyncContainer
import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeep.domain.model import RefreshTokenRecord
from gatekeep.domain.repository import AccountRepository, RefreshTokenRepository
from gatekeep.domain.value import RefreshTokenId
from gatekeep.util.tokens import generate_refresh_token, hash_refresh_token
from tests.factories import make_account
from tests.harness import create_env_fixture

pytestmark = pytest.mark.integration

integration_env = create_env_fixture(unmock={"persistence"})


@pytest_asyncio.fixture(autouse=True)
async def clean_database(integration_env):
    """Clean database before each test."""
    session = await integration_env.get(AsyncSession)
    await session.execute(
        text("TRUNCATE TABLE refresh_tokens, linked_identities, accounts CASCADE")
    )
    await session.commit()
    yield


async def make_record(integration_env: AsyncContainer) -> RefreshTokenRecord:
    accounts = await integration_env.get(AccountRepository)
    account = await accounts.insert(make_account())
    now = datetime.now(timezone.utc)
    return RefreshTokenRecord(
        id=RefreshTokenId(uuid4()),
        account_id=account.id,
        token_hash=hash_refresh_token(generate_refresh_token()),
        created_at=now,
        expires_at=now + timedelta(days=30),
    )


class TestPostgresRefreshTokenRepository:
    """Tests for PostgresRefreshTokenRepository."""

    @pytest.mark.asyncio
    async def test_insert_and_find_by_hash(self, integration_env: AsyncContainer):
        # Arrange
        repository = await integration_env.get(RefreshTokenRepository)
        record = await make_record(integration_env)

        # Act
        await repository.insert(record)
        found = await repository.find_by_hash(record.token_hash)

        # Assert
        assert found is not None
        assert found.id == record.id
        assert found.account_id == record.account_id
        assert found.revoked_at is None

    @pytest.mark.asyncio
    async def test_revoke_if_active_only_once(self, integration_env: AsyncContainer):
        """Test the conditional revoke succeeds exactly once."""
        # Arrange
        repository = await integration_env.get(RefreshTokenRepository)
        record = await repository.insert(await make_record(integration_env))
        now = datetime.now(timezone.utc)

        # Act
        first = await repository.revoke_if_active(record.id, now, "successor-hash")
        second = await repository.revoke_if_active(record.id, now, "other-hash")

        # Assert
        assert first is True
        assert second is False
        found = await repository.find_by_hash(record.token_hash)
        assert found.revoked_at is not None
        assert found.replaced_by_token_hash == "successor-hash"

    @pytest.mark.asyncio
    async def test_unknown_hash(self, integration_env: AsyncContainer):
        repository = await integration_env.get(RefreshTokenRepository)

        assert await repository.find_by_hash("0" * 64) is None
