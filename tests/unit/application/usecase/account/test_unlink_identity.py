"""Unit tests for UnlinkIdentityUseCase."""

from dishka import AsyncContainer
import pytest

from gatekeep.application.usecase.account import (
    UnlinkIdentityRequest,
    UnlinkIdentityUseCase,
)
from gatekeep.application.usecase.auth import SignInRequest, SignInUseCase
from gatekeep.domain.error import (
    InvalidAccessTokenError,
    MalformedRequestError,
    NotFoundError,
)
from gatekeep.domain.value import AuthProvider
from tests.harness import create_env_fixture
from tests.tokens import google_id_token, microsoft_id_token

# Unit test fixture
unit_env = create_env_fixture()


class TestUnlinkIdentityUseCase:
    """Tests for UnlinkIdentityUseCase."""

    @pytest.mark.asyncio
    async def test_unlink_then_sign_in_creates_new_account(
        self, unit_env: AsyncContainer
    ):
        """An unlinked identity without email should get its own account next time."""
        # Arrange
        sign_in = await unit_env.get(SignInUseCase)
        unlink = await unit_env.get(UnlinkIdentityUseCase)
        google = await sign_in.execute(
            SignInRequest(
                provider="google",
                id_token=google_id_token("g123", email="alice@example.com"),
            )
        )
        await sign_in.execute(
            SignInRequest(
                provider="microsoft",
                id_token=microsoft_id_token("m456", email="alice@example.com"),
            )
        )

        # Act
        profile = await unlink.execute(
            UnlinkIdentityRequest(token=google.access_token, provider="Microsoft")
        )
        again = await sign_in.execute(
            SignInRequest(provider="microsoft", id_token=microsoft_id_token("m456"))
        )

        # Assert
        assert [i.provider for i in profile.identities] == [AuthProvider.GOOGLE]
        assert again.account_id != google.account_id
        assert again.login_count == 1

    @pytest.mark.asyncio
    async def test_provider_not_linked(self, unit_env: AsyncContainer):
        # Arrange
        sign_in = await unit_env.get(SignInUseCase)
        unlink = await unit_env.get(UnlinkIdentityUseCase)
        google = await sign_in.execute(
            SignInRequest(provider="google", id_token=google_id_token("g123"))
        )

        # Act & Assert
        with pytest.raises(NotFoundError):
            await unlink.execute(
                UnlinkIdentityRequest(token=google.access_token, provider="facebook")
            )

    @pytest.mark.asyncio
    async def test_unknown_provider(self, unit_env: AsyncContainer):
        # Arrange
        sign_in = await unit_env.get(SignInUseCase)
        unlink = await unit_env.get(UnlinkIdentityUseCase)
        google = await sign_in.execute(
            SignInRequest(provider="google", id_token=google_id_token("g123"))
        )

        # Act & Assert
        with pytest.raises(MalformedRequestError):
            await unlink.execute(
                UnlinkIdentityRequest(token=google.access_token, provider="myspace")
            )

    @pytest.mark.asyncio
    async def test_requires_valid_token(self, unit_env: AsyncContainer):
        unlink = await unit_env.get(UnlinkIdentityUseCase)

        with pytest.raises(InvalidAccessTokenError):
            await unlink.execute(UnlinkIdentityRequest(token="", provider="google"))
